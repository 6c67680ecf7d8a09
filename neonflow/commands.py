import random
from datetime import date, timedelta

import click
from flask.cli import with_appcontext

from neonflow.extensions import db
from neonflow.exceptions import InsufficientStock
from neonflow.models import (
    StockItem, Movement, RejectMasterItem, RejectRecord, User, PlaylistItem, generate_id
)
from neonflow.schemas import STOCK_UNITS
from neonflow.services.movement_service import MovementService
from neonflow.services.reject_service import RejectService
from neonflow.services.user_service import UserService
from neonflow.utils.fake_gen import NeonFlowProvider, fake


def reset_database():
    """Drop and recreate every table, then seed the super admin"""
    db.session.remove()
    db.drop_all()
    db.create_all()
    return UserService.ensure_admin()


@click.command('init-db')
@click.option('--drop', is_flag=True, help='Drop existing tables first (destroys data)')
@with_appcontext
def init_db(drop):
    """Create tables and the super admin account."""
    if drop:
        click.confirm('This deletes every table. Continue?', abort=True)
        admin = reset_database()
    else:
        db.create_all()
        admin = UserService.ensure_admin()
    click.echo(click.style('✔ Database ready.', fg='green'))
    click.echo(f"Admin login: {admin.email}")


@click.command('status')
@with_appcontext
def status():
    """Row counts of the main tables."""
    click.echo(click.style('NeonFlow database status:', fg='cyan', bold=True))
    try:
        click.echo(f" - Users: \t\t{User.query.count()}")
        click.echo(f" - Items: \t\t{StockItem.query.count()}")
        click.echo(f" - Transactions: \t{Movement.query.count()}")
        click.echo(f" - Reject master: \t{RejectMasterItem.query.count()}")
        click.echo(f" - Reject records: \t{RejectRecord.query.count()}")
        click.echo(f" - Playlist: \t\t{PlaylistItem.query.count()}")
    except Exception as e:
        click.echo(click.style(f'✘ Could not read the database: {e}', fg='red'))
        click.echo("Did you run 'flask init-db' or 'flask db upgrade'?")


@click.command('forge')
@click.option('--scale', default=1, help='Data volume multiplier')
@click.option('--days', default=60, help='History length in days')
@with_appcontext
def forge(scale, days):
    """
    Rebuild the database with demo data.
    Warning: deletes all existing data.
    """
    click.echo(click.style(f'Forging demo data (scale {scale}x)...', fg='cyan', bold=True))
    reset_database()

    click.echo('Creating catalog...')
    items = init_catalog(20 * scale)

    click.echo('Replaying stock movements...')
    moved = init_movements(items, 40 * scale, days)

    click.echo('Creating reject data...')
    init_reject(5 * scale, days)

    click.echo(click.style('✔ Demo data ready.', fg='green', bold=True))
    click.echo(f"{len(items)} items, {moved} transactions")


def init_catalog(count):
    items = []
    for _ in range(count):
        name = fake.tech_product_name()
        item = StockItem(
            id=generate_id('INV'),
            name=name,
            sku=fake.tech_sku(name),
            category=fake.catalog_category(),
            quantity=0,
            price=round(random.uniform(5, 2500), 2),
            status=StockItem.STATUS_OUT_OF_STOCK,
        )
        db.session.add(item)
        items.append(item)
    db.session.commit()
    return items


def init_movements(items, count, days):
    """
    Chronological IN/OUT history recorded through the movement service,
    so every stock card reconciles with the live quantities.
    """
    start = date.today() - timedelta(days=days)
    recorded = 0
    for n in range(count):
        day = start + timedelta(days=int(n * days / max(count, 1)))
        # Early history is mostly receiving, later mostly shipping
        direction = 'IN' if n < count // 4 or random.random() < 0.4 else 'OUT'
        lines = []
        for item in random.sample(items, k=min(len(items), random.randint(1, 3))):
            unit = random.choice(STOCK_UNITS[:3]) if direction == 'IN' else STOCK_UNITS[0]
            lines.append({'item_id': item.id, 'order_quantity': random.randint(1, 5 if direction == 'IN' else 15),
                          'unit_name': unit.name, 'unit_ratio': unit.ratio})
        try:
            MovementService.record_movement({
                'date': day,
                'direction': direction,
                'lines': lines,
                'reference_number': f"{'PO' if direction == 'IN' else 'DO'}-{fake.random_int(1000, 9999)}",
                'notes': fake.sentence(nb_words=6),
            })
            recorded += 1
        except InsufficientStock:
            continue
    return recorded


def init_reject(count, days):
    master = RejectService.upsert_master([
        {'name': name, 'sku': f"RJ-{i:03d}", 'default_unit': unit, 'category': 'Food'}
        for i, (name, unit) in enumerate(NeonFlowProvider.waste_items, start=1)
    ])
    for _ in range(count):
        picks = random.sample(master, k=min(len(master), 3))
        RejectService.record_reject({
            'date': date.today() - timedelta(days=random.randint(0, days)),
            'outlet_name': fake.outlet_name(),
            'lines': [{'master_id': m.id, 'name': m.name, 'sku': m.sku,
                       'unit_name': m.default_unit, 'order_quantity': random.randint(1, 10)} for m in picks],
        })
