"""
Models package - Pydantic models for type-safe resource handling.

Defines data models for:
- Webhook descriptions declared by an owner
- Owner identity and the logical webhook key
- OperatorGroup scoping state
"""
