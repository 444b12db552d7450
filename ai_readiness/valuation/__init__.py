"""
Valuation / impact projection from assessment scores.

Modules
-------
projector : project(): base EBITDA multiple and risk band, driver
            sub-scores, bounded potential improvement, EBIT impact.
"""
