"""
Utilities package - Helper functions and common utilities.

Contains utility modules for:
- Kubernetes client configuration
- Webhook rule safety validation
- Webhook description hashing
"""
