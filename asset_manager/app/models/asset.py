# app/models/asset.py
from asset_manager.app import db
from .states import AssetState, match_state


class Asset(db.Model):
    code = db.Column(db.String(10), primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    specification = db.Column(db.Text)
    installed_date = db.Column(db.Date, nullable=False)
    state = db.Column(db.String(30), nullable=False, default=AssetState.AVAILABLE.value)
    location_code = db.Column(db.String(10), nullable=False)
    category_id = db.Column(db.Integer, db.ForeignKey('category.id'), nullable=False)

    assignments = db.relationship('Assignment', backref='asset', lazy=True)

    def __init__(self, code, name, category, installed_date, location_code, state=None, specification=None):
        # Standardize asset code (e.g., uppercase, remove extra spaces)
        self.code = str(code).strip().upper()
        self.name = name.strip()
        self.category = category
        self.installed_date = installed_date
        self.location_code = location_code
        self.specification = specification

        # Validate and standardize state
        if state:
            self.state = match_state(AssetState, state).value
        else:
            self.state = AssetState.AVAILABLE.value

    def to_dict(self):
        return {
            'code': self.code,
            'name': self.name,
            'category': self.category.name,
            'categoryId': self.category_id,
            'specification': self.specification,
            'installedDate': self.installed_date.isoformat(),
            'state': self.state,
            'locationCode': self.location_code,
        }

    def __repr__(self):
        return f'<Asset {self.code}: {self.name} ({self.state})>'
