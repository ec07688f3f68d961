"""
Core simulation engine: data model, circuit graph, MNA assembly, linear
solvers, validation and the design-rule engine.
"""
