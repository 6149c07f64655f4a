"""
Text Rendering

Formats a RankingSet as plain-text tables, one titled block per table,
in the same layout the ranking engine logs its top players.
"""

from tadoku_stats.scoring.ranker import RankingSet, RankingTable

EMPTY_TABLE = "(no entries)"


def format_table(table: RankingTable, precision: int = 1) -> str:
    """Render one table as a title line, an underline and the rows."""
    if precision < 0:
        raise ValueError(f"precision must be >= 0, got {precision}")
    title = table.title
    lines = [title, "-" * len(title)]
    if len(table) == 0:
        lines.append(EMPTY_TABLE)
    else:
        df = table.to_frame()
        lines.append(df.to_string(index=False, float_format=lambda v: f"{v:.{precision}f}"))
    return "\n".join(lines)


def format_rankings(rankings: RankingSet, precision: int = 1) -> str:
    """Render every table in the set, separated by blank lines."""
    return "\n\n".join(format_table(table, precision) for table in rankings.tables()) + "\n"
