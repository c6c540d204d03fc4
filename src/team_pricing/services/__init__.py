"""Services subpackage - team item storage and participation."""
from .team_items_service import TeamItemsService, TeamItem, ItemQuote

__all__ = ['TeamItemsService', 'TeamItem', 'ItemQuote']
