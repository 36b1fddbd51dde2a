"""IAU 2000A nutation coefficient tables (IERS Conventions 2010, Tables 5.3a/5.3b)."""
