"""
Board permission management feature module.

Assigns READ, EDIT or ADMIN on a board to users and groups. Only board
administrators can see or change the assignments.
"""
