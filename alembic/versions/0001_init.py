from alembic import op
import sqlalchemy as sa
from payments_service.core_settings import get_settings

revision = '0001_init'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        get_settings().PAYMENTS_COLLECTION,
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('version', sa.Integer, nullable=False),
        sa.Column('organisation_id', sa.String(), nullable=False),
        sa.Column('document', sa.JSON, nullable=False)
    )

def downgrade():
    op.drop_table(get_settings().PAYMENTS_COLLECTION)
