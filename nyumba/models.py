# nyumba/models.py
from . import db


class Landlord(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    properties = db.relationship('Property', back_populates='landlord')

    def to_dict(self):
        return {'id': self.id, 'name': self.name}


class Property(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    location = db.Column(db.String(200), nullable=False, default='')
    landlord_id = db.Column(db.Integer, db.ForeignKey('landlord.id'), nullable=True)

    landlord = db.relationship('Landlord', back_populates='properties')
    categories = db.relationship('UnitCategory', back_populates='property',
                                 order_by='UnitCategory.id', cascade='all, delete-orphan')

    @property
    def units(self):
        return [unit for cat in self.categories for unit in cat.units]

    def to_dict(self, nested=False):
        data = {
            'id': self.id,
            'name': self.name,
            'location': self.location,
            'landlord_id': self.landlord_id,
            'category_count': len(self.categories),
            'unit_count': len(self.units),
        }
        if nested:
            data['categories'] = [c.to_dict(nested=True) for c in self.categories]
        return data


class UnitCategory(db.Model):
    """A rent tier within a property, e.g. '1 Bedroom' at 25000 a month."""
    id = db.Column(db.Integer, primary_key=True)
    property_id = db.Column(db.Integer, db.ForeignKey('property.id'), nullable=False)
    name = db.Column(db.String(50), nullable=False)
    rent = db.Column(db.Integer, nullable=False)

    property = db.relationship('Property', back_populates='categories')
    units = db.relationship('Unit', back_populates='category',
                            order_by='Unit.id', cascade='all, delete-orphan')

    def to_dict(self, nested=False):
        data = {
            'id': self.id,
            'property_id': self.property_id,
            'name': self.name,
            'rent': self.rent,
            'unit_count': len(self.units),
        }
        if nested:
            data['units'] = [u.to_dict() for u in self.units]
        return data


class Unit(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    category_id = db.Column(db.Integer, db.ForeignKey('unit_category.id'), nullable=False)
    unit_number = db.Column(db.String(20), nullable=False)

    category = db.relationship('UnitCategory', back_populates='units')
    tenancies = db.relationship('Tenant', back_populates='unit',
                                order_by='Tenant.move_in_date', cascade='all, delete-orphan')

    @property
    def current_tenant(self):
        """The tenant whose tenancy on this unit has not ended, if any."""
        for tenant in self.tenancies:
            if tenant.move_out_date is None:
                return tenant
        return None

    @property
    def is_occupied(self):
        return self.current_tenant is not None

    # Keep last: from here on the name shadows the builtin in this class body
    @property
    def property(self):
        return self.category.property

    def to_dict(self):
        tenant = self.current_tenant
        return {
            'id': self.id,
            'category_id': self.category_id,
            'unit_number': self.unit_number,
            'tenant_id': tenant.id if tenant else None,
        }


class Tenant(db.Model):
    """A tenancy: one person occupying one unit from move_in_date."""
    id = db.Column(db.Integer, primary_key=True)
    unit_id = db.Column(db.Integer, db.ForeignKey('unit.id'), nullable=False)
    name = db.Column(db.String(100), nullable=False)
    phone = db.Column(db.String(20), nullable=False)
    email = db.Column(db.String(120), nullable=False)

    move_in_date = db.Column(db.Date, nullable=False)
    move_out_date = db.Column(db.Date, nullable=True) # null means currently occupying

    unit = db.relationship('Unit', back_populates='tenancies')
    payments = db.relationship('Payment', back_populates='tenant',
                               order_by='Payment.payment_date.desc()', cascade='all, delete-orphan')

    @property
    def is_current(self):
        return self.move_out_date is None

    @property
    def property(self):
        return self.unit.category.property

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'phone': self.phone,
            'email': self.email,
            'unit_id': self.unit_id,
            'unit_number': self.unit.unit_number if self.unit else None,
            'property_id': self.property.id if self.unit else None,
            'move_in_date': self.move_in_date.isoformat() if self.move_in_date else None,
            'move_out_date': self.move_out_date.isoformat() if self.move_out_date else None,
        }


class Payment(db.Model):
    """A rent payment credited to one billing month (YYYY-MM)."""
    id = db.Column(db.Integer, primary_key=True)
    tenant_id = db.Column(db.Integer, db.ForeignKey('tenant.id'), nullable=False)
    amount = db.Column(db.Integer, nullable=False)
    payment_date = db.Column(db.Date, nullable=False)
    month_paid_for = db.Column(db.String(7), nullable=False, index=True)

    tenant = db.relationship('Tenant', back_populates='payments')

    def to_dict(self):
        return {
            'id': self.id,
            'tenant_id': self.tenant_id,
            'amount': self.amount,
            'payment_date': self.payment_date.isoformat() if self.payment_date else None,
            'month_paid_for': self.month_paid_for,
        }
