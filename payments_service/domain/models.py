from sqlalchemy import Column, Integer, JSON, MetaData, String, Table

# One table per collection. The identifier is the primary key so the store
# itself rejects a second record with the same id.

def build_payment_table(collection: str, metadata: MetaData) -> Table:
    if collection in metadata.tables:
        return metadata.tables[collection]
    return Table(
        collection,
        metadata,
        Column("id", String, primary_key=True),
        Column("type", String, nullable=False, default=""),
        Column("version", Integer, nullable=False, default=0),
        Column("organisation_id", String, nullable=False, default=""),
        # Full payment as received, attributes included
        Column("document", JSON, nullable=False),
    )
