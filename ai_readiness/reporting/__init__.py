"""
Reporting: plain-text rendering of scores, recommendations and valuation
for the CLI.

Modules
-------
formatters : format_score_summary(), format_recommendations(),
             format_valuation(): return strings for ``typer.echo()``.
"""
