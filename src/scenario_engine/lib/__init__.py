"""
Lib: the vocabulary scripts are written in.

- core_value: coercion functions (Event -> Value)
- contract_lookup: name resolution against the World's registries
- invocation: the boundary to the external service
- core: top-level commands (From, Print, History)
- price_oracle: the PriceOracle subsystem table
"""
