"""Query building, lifecycle, transactions, raw queries and value formats for an engine."""