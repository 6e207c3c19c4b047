"""Place model for crowd-sourced reading locations."""

import json
from datetime import datetime
from bookmaru import db


class Place(db.Model):
    """A reading location with English and Korean content."""

    __tablename__ = 'places'

    # Columns that come in an _en/_ko pair
    BILINGUAL_FIELDS = ('name', 'description', 'city', 'district', 'location', 'recommended_book')
    # Set once at creation
    IMMUTABLE_FIELDS = ('id', 'created_at', 'original_language')

    id = db.Column(db.Integer, primary_key=True)
    original_language = db.Column(db.String(2), nullable=False)  # 'en', 'ko'

    name_en = db.Column(db.String(255), nullable=True, index=True)
    name_ko = db.Column(db.String(255), nullable=True, index=True)
    description_en = db.Column(db.Text, nullable=True)
    description_ko = db.Column(db.Text, nullable=True)
    city_en = db.Column(db.String(100), nullable=True)
    city_ko = db.Column(db.String(100), nullable=True)
    district_en = db.Column(db.String(100), nullable=True)
    district_ko = db.Column(db.String(100), nullable=True)
    location_en = db.Column(db.String(255), nullable=True)  # legacy single-field region
    location_ko = db.Column(db.String(255), nullable=True)
    recommended_book_en = db.Column(db.Text, nullable=True)  # JSON {title, author, link?}
    recommended_book_ko = db.Column(db.Text, nullable=True)

    latitude = db.Column(db.Float, nullable=True)
    longitude = db.Column(db.Float, nullable=True)
    category = db.Column(db.String(50), nullable=True, index=True)
    quietness = db.Column(db.Integer, nullable=True)  # 1 (lively) .. 5 (silent)
    photos = db.Column(db.JSON, nullable=True)  # Array of photo URLs

    status = db.Column(db.String(20), default='pending', nullable=False, index=True)  # 'pending', 'approved', 'rejected'
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)

    def field(self, name: str, language: str):
        """Read one language variant of a bilingual column."""
        return getattr(self, f'{name}_{language}')

    def set_field(self, name: str, language: str, value):
        setattr(self, f'{name}_{language}', value)

    @staticmethod
    def dump_book(book) -> str | None:
        """Serialize a recommended book for storage; None when there is none."""
        if book is None or book == '':
            return None
        if isinstance(book, str):
            return book
        return json.dumps(book, ensure_ascii=False)

    def get_book(self, language: str):
        """Decoded recommended book for a language, or None."""
        from bookmaru.utils.place_helpers import parse_recommended_book
        return parse_recommended_book(self.field('recommended_book', language))

    @classmethod
    def column_names(cls):
        return [column.name for column in cls.__table__.columns]

    @classmethod
    def column_length(cls, name: str):
        """Declared max length of a string column, None when unbounded."""
        column = cls.__table__.columns.get(name)
        return getattr(column.type, 'length', None) if column is not None else None

    def to_dict(self):
        """Convert place to dictionary (raw row, books decoded)."""
        data = {}
        for name in self.column_names():
            value = getattr(self, name)
            if isinstance(value, datetime):
                value = value.isoformat()
            data[name] = value
        data['recommended_book_en'] = self.get_book('en')
        data['recommended_book_ko'] = self.get_book('ko')
        return data

    def __repr__(self):
        return f'<Place {self.id}: {self.name_en or self.name_ko} ({self.status})>'
