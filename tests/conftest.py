import pytest

from team_pricing.engine.models import PricingParameters
from team_pricing.services.team_items_service import TeamItemsService


@pytest.fixture
def default_params():
    """The admin form defaults: 10000 base, 7000 floor, 1% every 10, 30% cap."""
    return PricingParameters(
        base_price=10000,
        min_price=7000,
        discount_step_percent=1,
        discount_step_every=10,
        max_discount_percent=30,
    )


@pytest.fixture
def service(tmp_path):
    """Service backed by empty CSV files in a temp directory."""
    return TeamItemsService(
        team_items_csv=tmp_path / 'team_items.csv',
        participants_csv=tmp_path / 'team_item_participants.csv',
    )


@pytest.fixture
def play_mat(service):
    return service.create_item({
        'title': 'K Play Mat TEAM',
        'slug': 'k-play-mat-team',
        'tags': ['playmat', 'baby'],
        'base_price': 10000,
        'min_price': 7000,
        'discount_step_percent': 1,
        'discount_step_every': 10,
        'max_discount_percent': 30,
    })
