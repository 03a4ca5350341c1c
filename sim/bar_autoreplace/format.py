"""
BAR Unit AutoReplace - Output Formatting
==========================================
Pretty-printing for replay results.
"""

from bar_autoreplace.replay import ReplayResult


def print_full_report(result: ReplayResult):
    print()
    print("=" * 70)
    print(f"  BAR UNIT AUTOREPLACE - REPLAY")
    print(f"  Scenario: {result.scenario_name}")
    print(f"  Events:   {result.events_applied}")
    print("=" * 70)

    print_events(result)
    print_orders(result)
    print_echoes(result)
    print_tables(result)


def print_events(result: ReplayResult):
    print()
    print("--- EVENTS ---")
    for i, line in enumerate(result.event_log, 1):
        print(f"  {i:>3}. {line}")


def print_orders(result: ReplayResult):
    print()
    print("--- ISSUED ORDERS ---")
    if not result.issued:
        print("  (none)")
        return
    for entry in result.issued:
        print(f"  {entry}")


def print_echoes(result: ReplayResult):
    print()
    print("--- ECHO ---")
    if not result.echoes:
        print("  (none)")
        return
    for msg in result.echoes:
        print(f"  {msg}")


def print_tables(result: ReplayResult):
    tables = result.tables
    print()
    print("--- TRACKER STATE ---")
    print(f"  Team: {tables.get('team_id')}")

    tracked = tables.get("tracked", {})
    print(f"\n  Tracked units ({len(tracked)}):")
    for uid, entry in tracked.items():
        print(f"    {uid:<6} orders: {', '.join(entry['orders']) or '-'}")
        if entry.get("factory_orders") is not None:
            print(f"    {'':<6} factory: {', '.join(entry['factory_orders']) or '-'}")

    pending = tables.get("pending", {})
    count = sum(len(q) for q in pending.values())
    print(f"\n  Pending factory orders ({count}):")
    for def_id, queue in pending.items():
        for e in queue:
            print(f"    def {def_id:<4} factory {e['factory_id']:<6} orders: {', '.join(e['orders']) or '-'}")

    cache = tables.get("transport_cache", {})
    print(f"\n  Transport cache ({len(cache)}):")
    for uid, orders in cache.items():
        print(f"    {uid:<6} orders: {', '.join(orders) or '-'}")
