# ORM models package
