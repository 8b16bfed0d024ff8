"""
Principals: users and groups that can hold a board role.

Resolves (type, id) references against the host directory and describes
principals for API responses.
"""
