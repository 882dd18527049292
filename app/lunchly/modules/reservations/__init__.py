"""
Reservations module.

Reservations are created against an existing customer and listed on the
customer detail page. There is no edit or delete path.
"""
