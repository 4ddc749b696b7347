"""
Application database configuration.
Stores users, blood requests, donor records, contacts and notifications,
plus any collection provisioned at runtime by administrators.
"""


class Collections:
    """Collection names in the application database."""
    USERS = "users"
    BLOOD_REQUESTS = "bloodrequests"
    NOTIFICATIONS = "notifications"
    CONTACTS = "contacts"
    CONTACT_MESSAGES = "contactmessages"
    DONOR_BLOOD = "donorblood"


# Collections that must exist before the API serves requests
REQUIRED_COLLECTIONS = [
    Collections.USERS,
    Collections.BLOOD_REQUESTS,
    Collections.NOTIFICATIONS,
    Collections.CONTACTS,
    Collections.CONTACT_MESSAGES,
    Collections.DONOR_BLOOD,
]
