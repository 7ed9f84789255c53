import json
import sys
from pathlib import Path

# Make the repo importable when run as `python scripts/check_view_configs.py`
BASE_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(BASE_DIR))

from market_dash.config.config_loader import load_global_config  # noqa: E402
from market_dash.views import ALL_VIEWS  # noqa: E402

CONFIG_DIR = BASE_DIR / "config"


def check_view_configs(config_dir: Path = CONFIG_DIR) -> int:
    """
    Print one line per view: its config file, the table file it reads and
    whether the configured default sort is one the view can sort on.
    Returns the number of problems found.
    """
    print(f"{'VIEW':<15} | {'TABLE':<20} | {'ROWS':>5} | {'DEFAULT SORT':<25} | STATUS")
    print("-" * 90)

    global_config = load_global_config(config_dir)
    cfg_by_id = {cfg.view_id: cfg for cfg in global_config.views}
    problems = 0

    for view_cls in ALL_VIEWS:
        cfg = cfg_by_id.get(view_cls.id)
        view = view_cls(config=cfg)
        table_path = global_config.data_root / f"{view.table_name}.json"

        status = []
        rows = "-"
        if cfg is None:
            status.append("no config file (defaults)")
        elif not cfg.enabled:
            status.append("disabled")

        if not table_path.is_file():
            status.append(f"MISSING {table_path.name}")
            problems += 1
        else:
            try:
                with table_path.open(encoding="utf-8") as f:
                    rows = str(len(json.load(f)))
            except (OSError, ValueError, TypeError):
                status.append("invalid JSON")
                problems += 1

        sort = cfg.default_sort if cfg is not None else None
        if sort is not None and not view.schema.is_sortable(sort.field):
            status.append(f"'{sort.field}' is not sortable, falling back to {view.default_sort.field}")
            problems += 1
            sort = None

        effective = sort or view.default_sort
        sort_text = f"{effective.field} {effective.direction.value}"
        print(f"{view.id:<15} | {view.table_name:<20} | {rows:>5} | {sort_text:<25} | {'; '.join(status) or 'OK'}")

    return problems


if __name__ == "__main__":
    config_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else CONFIG_DIR
    sys.exit(1 if check_view_configs(config_dir) else 0)
