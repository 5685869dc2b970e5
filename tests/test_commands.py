# tests/test_commands.py
from nyumba.models import Property, Tenant


def test_seed_demo_command_loads_once(app, db_session):
    runner = app.test_cli_runner()

    first = runner.invoke(args=['seed-demo'])
    assert first.exit_code == 0
    assert 'Demo portfolio loaded.' in first.output
    assert Property.query.count() == 2
    assert Tenant.query.count() == 5

    second = runner.invoke(args=['seed-demo'])
    assert second.exit_code == 0
    assert 'nothing loaded' in second.output
    assert Property.query.count() == 2
