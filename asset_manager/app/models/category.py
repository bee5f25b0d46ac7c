from asset_manager.app import db


class Category(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    prefix = db.Column(db.String(2), unique=True, nullable=False)

    assets = db.relationship('Asset', backref='category', lazy=True)

    def __init__(self, name, prefix):
        self.name = name.strip()
        self.prefix = str(prefix).strip().upper()

    def __repr__(self):
        return f"Category('{self.prefix}', '{self.name}')"
