"""
Team Items Service - storage for group-buy items and their participants.
Handles reading/writing team_items.csv and team_item_participants.csv.

Every call re-reads the CSV files, so pricing parameters and counts are
always fresh; nothing is cached between requests.
"""
import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import pandas as pd

from ..engine.models import PRICING_COLUMNS, PricingParameters, ProgressSnapshot
from ..engine.pricing_engine import compute_discounted_price, compute_pricing_progress
from ..engine.validation import ValidationResult, validate_pricing_row
from ..errors import (
    DuplicateItemError,
    InactiveItemError,
    InvalidRequestError,
    ItemNotFoundError,
    PricingConfigError,
)

logger = logging.getLogger(__name__)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='seconds')


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


@dataclass
class TeamItem:
    """A group-buy item as stored in the catalog."""
    id: str
    slug: str
    title: str
    pricing: PricingParameters
    description: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    cover_image_url: Optional[str] = None
    is_active: bool = True
    created_at: str = ''

    def to_csv_row(self) -> dict:
        """Convert to CSV row format."""
        row = {
            'id': self.id,
            'slug': self.slug,
            'title': self.title,
            'description': self.description or '',
            'tags': ','.join(self.tags),
            'cover_image_url': self.cover_image_url or '',
            'is_active': 'true' if self.is_active else 'false',
            'created_at': self.created_at,
        }
        for column, value in self.pricing.to_row().items():
            row[column] = _format_number(value)
        return row

    @classmethod
    def from_csv_row(cls, row: dict) -> 'TeamItem':
        """Create TeamItem from CSV row."""
        tags = [t.strip() for t in str(row.get('tags') or '').split(',') if t.strip()]
        return cls(
            id=str(row.get('id', '')),
            slug=str(row.get('slug', '')),
            title=str(row.get('title', '')),
            pricing=PricingParameters.from_row(row),
            description=row.get('description') or None,
            tags=tags,
            cover_image_url=row.get('cover_image_url') or None,
            is_active=str(row.get('is_active', 'true')).strip().lower() == 'true',
            created_at=str(row.get('created_at') or ''),
        )

    def to_dict(self) -> dict:
        """JSON-friendly item payload (stored column names)."""
        data = {
            'id': self.id,
            'slug': self.slug,
            'title': self.title,
            'description': self.description,
            'tags': self.tags,
            'cover_image_url': self.cover_image_url,
            'is_active': self.is_active,
            'created_at': self.created_at,
        }
        data.update(self.pricing.to_row())
        return data


@dataclass
class ItemQuote:
    """An item with its live participant count and final price."""
    item: TeamItem
    participants: int
    final_price: int


class TeamItemsService:
    """Service for managing team items and participation records."""

    ITEM_COLUMNS = [
        'id', 'slug', 'title', 'description', 'tags', 'cover_image_url',
        'is_active', 'created_at', *PRICING_COLUMNS,
    ]
    PARTICIPANT_COLUMNS = ['id', 'team_item_id', 'user_id', 'created_at']

    EDITABLE_FIELDS = {
        'slug', 'title', 'description', 'tags', 'cover_image_url', 'is_active', *PRICING_COLUMNS,
    }
    CLEARABLE_FIELDS = {'description', 'tags', 'cover_image_url'}

    def __init__(self, team_items_csv: Path, participants_csv: Path):
        self.team_items_csv = team_items_csv
        self.participants_csv = participants_csv
        self._write_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    def _load_csv(self, path: Path, columns: list[str]) -> pd.DataFrame:
        if not path.exists():
            return pd.DataFrame(columns=columns)
        df = pd.read_csv(path, dtype=str).fillna('')
        df.columns = [c.strip() for c in df.columns]
        for col in columns:
            if col not in df.columns:
                df[col] = ''
        for col in df.columns:
            df[col] = df[col].astype(str).str.strip()
        return df

    def _write_csv(self, path: Path, rows: list[dict], columns: list[str]):
        path.parent.mkdir(parents=True, exist_ok=True)
        pd.DataFrame(rows, columns=columns).to_csv(path, index=False)

    def _load_items(self) -> pd.DataFrame:
        return self._load_csv(self.team_items_csv, self.ITEM_COLUMNS)

    def _load_participants(self) -> pd.DataFrame:
        return self._load_csv(self.participants_csv, self.PARTICIPANT_COLUMNS)

    def _write_items(self, items: list[TeamItem]):
        self._write_csv(self.team_items_csv, [i.to_csv_row() for i in items], self.ITEM_COLUMNS)

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def list_items(self, active_only: bool = True) -> list[TeamItem]:
        """List items, newest first."""
        df = self._load_items()
        if active_only and not df.empty:
            df = df[df['is_active'].str.lower() == 'true']
        if not df.empty:
            df = df.sort_values('created_at', ascending=False, kind='stable')
        return [TeamItem.from_csv_row(row) for row in df.to_dict(orient='records')]

    def get_item(self, slug: str) -> Optional[TeamItem]:
        """Get a single item by slug."""
        slug = str(slug).strip()
        df = self._load_items()
        match = df[df['slug'] == slug]
        if match.empty:
            return None
        return TeamItem.from_csv_row(match.iloc[0].to_dict())

    def require_item(self, slug: str) -> TeamItem:
        item = self.get_item(slug)
        if item is None:
            raise ItemNotFoundError(slug)
        return item

    def validate_item(self, data: dict) -> ValidationResult:
        """Validate item fields and pricing without saving."""
        result = validate_pricing_row(data)
        if 'title' in data and not str(data.get('title') or '').strip():
            result.errors.insert(0, "Title is required")
            result.valid = False
        if 'slug' in data and not str(data.get('slug') or '').strip():
            result.errors.insert(0, "Slug is required")
            result.valid = False
        return result

    def create_item(self, data: dict) -> TeamItem:
        """Create a new item; pricing is validated before anything is written."""
        data = dict(data)
        data.setdefault('title', '')
        data.setdefault('slug', '')
        validation = self.validate_item(data)
        if not validation.valid:
            raise PricingConfigError(validation.errors, validation.warnings)
        for warning in validation.warnings:
            logger.warning("Team item '%s': %s", data['slug'], warning)

        with self._write_lock:
            items = self.list_items(active_only=False)
            slug = str(data['slug']).strip()
            if any(i.slug == slug for i in items):
                raise DuplicateItemError(slug)

            item = TeamItem.from_csv_row({
                **self._normalize_fields(data),
                'id': uuid.uuid4().hex,
                'created_at': _utc_now(),
            })
            items.append(item)
            self._write_items(items)

        logger.info("Created team item '%s' (%s)", item.slug, item.id)
        return item

    def update_item(self, slug: str, updates: dict) -> TeamItem:
        """Update an existing item; the merged pricing is re-validated."""
        unknown = set(updates) - self.EDITABLE_FIELDS
        if unknown:
            raise InvalidRequestError(f"Unknown field(s): {', '.join(sorted(unknown))}")

        slug = str(slug).strip()
        # null only clears the free-text fields; elsewhere it means "leave as is"
        updates = {
            key: value for key, value in updates.items()
            if value is not None or key in self.CLEARABLE_FIELDS
        }

        with self._write_lock:
            items = self.list_items(active_only=False)
            for i, existing in enumerate(items):
                if existing.slug == slug:
                    break
            else:
                raise ItemNotFoundError(slug)

            merged = {**existing.to_csv_row(), **self._normalize_fields(updates)}
            validation = self.validate_item(merged)
            if not validation.valid:
                raise PricingConfigError(validation.errors, validation.warnings)

            new_slug = str(merged['slug']).strip()
            if new_slug != slug and any(other.slug == new_slug for other in items):
                raise DuplicateItemError(new_slug)

            items[i] = TeamItem.from_csv_row(merged)
            self._write_items(items)

        logger.info("Updated team item '%s'", slug)
        return items[i]

    def _normalize_fields(self, data: dict) -> dict:
        """Map API values (bools, lists, numbers) onto CSV cell strings."""
        row = {}
        for key, value in data.items():
            if value is None:
                row[key] = ''
            elif key == 'is_active':
                row[key] = 'true' if value in (True, 'true', 'on', '1', 1) else 'false'
            elif key == 'tags' and isinstance(value, (list, tuple)):
                row[key] = ','.join(str(t).strip() for t in value if str(t).strip())
            else:
                row[key] = str(value).strip()
        return row

    # ------------------------------------------------------------------
    # Participants
    # ------------------------------------------------------------------

    def count_participants(self, item_id: str) -> int:
        """Live participant count for an item."""
        df = self._load_participants()
        return int((df['team_item_id'] == str(item_id)).sum())

    def join(self, slug: str, user_id: Any) -> int:
        """
        Register a user as a participant; joining twice is a no-op.

        Returns the participant count after the join.
        """
        user_id = str(user_id if user_id is not None else '').strip()
        if not user_id:
            raise InvalidRequestError("local_user_id required")

        item = self.require_item(slug)
        if not item.is_active:
            raise InactiveItemError(slug)

        with self._write_lock:
            df = self._load_participants()
            exists = ((df['team_item_id'] == item.id) & (df['user_id'] == user_id)).any()
            if not exists:
                rows = df[self.PARTICIPANT_COLUMNS].to_dict(orient='records')
                rows.append({
                    'id': uuid.uuid4().hex,
                    'team_item_id': item.id,
                    'user_id': user_id,
                    'created_at': _utc_now(),
                })
                self._write_csv(self.participants_csv, rows, self.PARTICIPANT_COLUMNS)
                logger.info("User %s joined team item '%s'", user_id, slug)
            else:
                logger.debug("User %s already joined team item '%s'", user_id, slug)

        return self.count_participants(item.id)

    # ------------------------------------------------------------------
    # Pricing
    # ------------------------------------------------------------------

    def quote(self, slug: str) -> ItemQuote:
        """Load an item and its live count, then price it."""
        item = self.require_item(slug)
        participants = self.count_participants(item.id)
        final_price = compute_discounted_price(item.pricing, participants)
        return ItemQuote(item=item, participants=participants, final_price=final_price)

    def progress(self, slug: str) -> tuple[TeamItem, ProgressSnapshot]:
        """Load an item and project progress toward its next discount step."""
        item = self.require_item(slug)
        participants = self.count_participants(item.id)
        return item, compute_pricing_progress(item.pricing, participants)

    def quote_all(self, active_only: bool = True) -> list[ItemQuote]:
        """Quote every listed item from a single participants read."""
        items = self.list_items(active_only=active_only)
        df = self._load_participants()
        counts = df['team_item_id'].value_counts().to_dict() if not df.empty else {}
        quotes = []
        for item in items:
            participants = int(counts.get(item.id, 0))
            quotes.append(ItemQuote(
                item=item,
                participants=participants,
                final_price=compute_discounted_price(item.pricing, participants),
            ))
        return quotes
