"""Policy subpackage - payment method rules for bookings."""
