"""
Customers module.

Customer list/search, top customers by reservation count, and the
add/detail/edit pages.
"""
