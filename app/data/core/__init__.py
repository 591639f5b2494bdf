"""
Core models: the collaborator entities a transaction references
"""

from .party import Party
from .factory import Factory
from .associate_company import AssociateCompany

__all__ = [
    'Party',
    'Factory',
    'AssociateCompany',
]
