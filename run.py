import os
from neonflow import create_app, db
from neonflow.models import (
    User, StockItem, Movement, MovementLine,
    RejectMasterItem, RejectRecord, RejectLine,
    AuditLog, PlaylistItem
)

# FLASK_ENV / FLASK_CONFIG pick the configuration
config_name = os.getenv('FLASK_ENV') or os.getenv('FLASK_CONFIG') or 'default'
if config_name in ('development', 'dev'):
    config_name = 'development'

app = create_app(config_name)


@app.shell_context_processor
def make_shell_context():
    """Objects preloaded into 'flask shell'"""
    return dict(
        db=db,
        app=app,
        User=User,
        StockItem=StockItem,
        Movement=Movement,
        MovementLine=MovementLine,
        RejectMasterItem=RejectMasterItem,
        RejectRecord=RejectRecord,
        RejectLine=RejectLine,
        AuditLog=AuditLog,
        PlaylistItem=PlaylistItem,
    )


if __name__ == '__main__':
    app.run(host='0.0.0.0', port=5000)
