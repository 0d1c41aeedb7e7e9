"""
auth — User authentication module.

Provides:
  • Password hashing (bcrypt)
  • Opaque access-token generation and header parsing
  • Error taxonomy rendered as JSON error bodies
  • ``AuthService`` (signup / login / authenticate)
"""
