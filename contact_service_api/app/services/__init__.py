"""
Service layer.

Each service encapsulates the directory logic of one resource (contacts,
groups, group rosters, the address book, profile information).  They
share ``ContainerRepository`` for every read-modify-write of a record,
so API handlers never talk to the store directly.
"""
