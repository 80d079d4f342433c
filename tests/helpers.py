ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "camp-secret"
CSRF_TOKEN = "token"


def prime_csrf(client):
    with client.session_transaction() as sess:
        sess["_csrf_token"] = CSRF_TOKEN
    return client


def valid_form(**overrides):
    data = {
        "relation_prefix": "श्री",
        "full_name": "राम कुमार",
        "email": "ram@example.com",
        "mobile": "9876543210",
        "address": "12 Station Road, Bikaner",
        "blood_group": "B+",
        "last_donation_date": "",
        "csrf_token": CSRF_TOKEN,
    }
    data.update(overrides)
    return data
