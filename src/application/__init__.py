"""
Application layer - Application Business Rules.

This layer contains application-specific business rules, including:
- Cascade planning and lifecycle orchestration
- Identity sequencing and campaign window validation
- The RegistryStorage facade used by the API
"""
