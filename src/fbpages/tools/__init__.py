"""Tool catalog and dispatch.

Declares the Facebook Pages tools, validates call arguments against
their schemas, and routes each call to one Graph API operation.
"""
