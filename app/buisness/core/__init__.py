"""
Core business infrastructure: errors, unit of work, collaborator lookups
"""
