"""Application Layer - use cases orchestrating the domain.

- Commands: RunTickCommand (write side, driven by the scheduler)
- Queries: order history, open positions, total PnL (read side)
- PositionStateMachine: in-memory owner of the single open position
- SnapshotCache: last computed market view
"""
