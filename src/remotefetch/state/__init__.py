"""Request lifecycle state.

The reducer in this package is the only code that decides what a request
state looks like after an event. The store applies events strictly in the
order they were dispatched.
"""
