"""SQLite database schema definitions."""

SCHEMA_SQL = """
-- Weight log; several entries may share a date
CREATE TABLE IF NOT EXISTS weight_entries (
    entry_id INTEGER PRIMARY KEY AUTOINCREMENT,
    entry_date DATE NOT NULL,
    weight_kg REAL NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_weight_entries_date ON weight_entries(entry_date);

-- Weight goals
CREATE TABLE IF NOT EXISTS weight_goals (
    goal_id INTEGER PRIMARY KEY AUTOINCREMENT,
    target_weight_kg REAL NOT NULL,
    target_date DATE,
    goal_type TEXT NOT NULL DEFAULT 'lose' CHECK(goal_type IN ('lose', 'gain', 'maintain')),
    status TEXT NOT NULL DEFAULT 'active' CHECK(status IN ('active', 'achieved', 'abandoned')),
    description TEXT,
    starting_weight_kg REAL,
    created_date DATE NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_weight_goals_status_type ON weight_goals(status, goal_type);
CREATE INDEX IF NOT EXISTS idx_weight_goals_target_date ON weight_goals(target_date);
"""


def get_schema_sql() -> str:
    """Return the complete schema SQL."""
    return SCHEMA_SQL
