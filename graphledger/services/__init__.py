"""Services: transactional use cases composed from the pure core and the SQL stores.

Invariants:
    - Every public operation runs inside transaction_scope: it joins the caller's
      transaction or owns one, and either all of its writes commit or none do
    - Validation and balance checks happen before the first write
    - One log line per committed state transition
"""
