# fleet_monitor/db/create_tables.py
from fleet_monitor.core.config import get_settings
from fleet_monitor.db.seed import seed_machines
from fleet_monitor.services.db_service import SqlStore, resolve_database_url


def main():
    url = resolve_database_url(get_settings())
    store = SqlStore.from_url(url)
    try:
        print("Creating tables from models.py ...")
        store.init_schema()
        inserted = seed_machines(store)
        print(f"Done! ({inserted} machines seeded)")
    finally:
        store.close()


if __name__ == "__main__":
    main()
