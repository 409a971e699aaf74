"""
auth — User authentication module.

Provides:
  • Credential store (SQL and in-memory)
  • Password hashing (bcrypt, configurable work factor)
  • JWT access-token issuance & verification
  • ``AuthService`` with register / validate_credentials / login
  • Register / Login / Me API routes
"""
