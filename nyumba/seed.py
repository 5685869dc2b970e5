# nyumba/seed.py
"""Demo portfolio: two properties in Nairobi with a handful of tenants and payments."""
import logging
from datetime import date

import click

from . import db
from .models import Landlord, Property, UnitCategory, Unit, Tenant, Payment

logger = logging.getLogger(__name__)

DEMO_PORTFOLIO = [
    {
        'name': 'KICC Apartments',
        'location': 'Nairobi CBD',
        'categories': [
            ('1 Bedroom', 25000, ['A1', 'A2', 'A3']),
            ('2 Bedroom', 40000, ['B1', 'B2']),
        ],
    },
    {
        'name': 'Westlands Heights',
        'location': 'Westlands, Nairobi',
        'categories': [
            ('Studio', 18000, ['S1', 'S2']),
        ],
    },
]

# unit number -> (name, phone, email, move-in date)
DEMO_TENANTS = {
    'A1': ('Alice Smith', '0712345678', 'alice@example.com', date(2023, 1, 15)),
    'A3': ('Bob Johnson', '0723456789', 'bob@example.com', date(2022, 11, 20)),
    'B1': ('Charlie Brown', '0734567890', 'charlie@example.com', date(2023, 5, 10)),
    'B2': ('Diana Prince', '0745678901', 'diana@example.com', date(2023, 2, 1)),
    'S2': ('Ethan Hunt', '0756789012', 'ethan@example.com', date(2023, 8, 1)),
}

# unit number -> [(amount, payment date, month paid for)]
DEMO_PAYMENTS = {
    'A1': [(25000, date(2023, 10, 5), '2023-10'), (25000, date(2023, 9, 4), '2023-09')],
    'A3': [(25000, date(2023, 10, 3), '2023-10')],
    'B1': [(40000, date(2023, 10, 1), '2023-10')],
    'B2': [(20000, date(2023, 10, 6), '2023-10')],  # partial payment
    'S2': [(18000, date(2023, 9, 2), '2023-09')],
}


def seed_demo_data():
    """Load the demo portfolio. Returns False without changes if properties already exist."""
    if Property.query.first() is not None:
        return False
    landlord = Landlord(name='John Doe Properties')
    db.session.add(landlord)
    # Objects are added one by one so ids follow the listing order above
    for entry in DEMO_PORTFOLIO:
        prop = Property(name=entry['name'], location=entry['location'], landlord=landlord)
        db.session.add(prop)
        for cat_name, rent, numbers in entry['categories']:
            cat = UnitCategory(property=prop, name=cat_name, rent=rent)
            db.session.add(cat)
            for number in numbers:
                unit = Unit(category=cat, unit_number=number)
                db.session.add(unit)
                if number not in DEMO_TENANTS:
                    continue
                name, phone, email, move_in = DEMO_TENANTS[number]
                tenant = Tenant(unit=unit, name=name, phone=phone, email=email,
                                move_in_date=move_in)
                db.session.add(tenant)
                for amount, paid_on, month in DEMO_PAYMENTS.get(number, []):
                    db.session.add(Payment(tenant=tenant, amount=amount, payment_date=paid_on,
                                           month_paid_for=month))
    db.session.commit()
    logger.info('Seeded demo portfolio')
    return True


def register_commands(app):
    @app.cli.command('seed-demo')
    def seed_demo_command():
        """Load the demo portfolio into an empty database."""
        if seed_demo_data():
            click.echo('Demo portfolio loaded.')
        else:
            click.echo('Database already has properties; nothing loaded.')
