RELATION_PREFIXES = [
    ("श्री", "श्री (Mr.)"),
    ("सुश्री", "सुश्री (Ms.)"),
    ("श्रीमती", "श्रीमती (Mrs.)"),
]

RELATION_PREFIX_VALUES = {value for value, _ in RELATION_PREFIXES}

BLOOD_GROUPS = ["A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-"]

ORGANIZATION_NAME = "International Vaish Federation"
ORGANIZATION_NAME_HI = "अंतर्राष्ट्रीय वैश्य महासंघ"
CAMP_TITLE = "Blood Donation Camp"
CAMP_TITLE_HI = "रक्तदान शिविर"

# (Hindi, English) pairs shown to the user
MESSAGES = {
    "required": ("कृपया सभी आवश्यक फील्ड भरें", "Please fill in all required fields"),
    "invalid_email": ("अमान्य ईमेल पता", "Please enter a valid email address"),
    "invalid_mobile": (
        "अमान्य मोबाइल नंबर",
        "Please enter a valid 10-digit mobile number",
    ),
    "invalid_prefix": ("अमान्य संबोधन", "Please choose a valid relation prefix"),
    "invalid_blood_group": ("अमान्य रक्त समूह", "Please choose a valid blood group"),
    "invalid_date": ("अमान्य तारीख", "Please enter a valid date in DD/MM/YYYY format"),
    "registration_failed": ("पंजीकरण में त्रुटि", "Registration failed"),
    "registration_ok": (
        "धन्यवाद! Thank you!",
        "आपका पंजीकरण सफल रहा है। Your registration is successful.",
    ),
    "email_failed": (
        "पंजीकरण सफल!",
        "Registration successful but email could not be sent. "
        "Please contact us for your certificate.",
    ),
    "login_ok": ("प्रवेश सफल", "Welcome to Admin Dashboard"),
    "login_failed": ("गलत पासवर्ड", "Incorrect username or password. Please try again."),
    "login_locked": (
        "प्रवेश अवरुद्ध",
        "Too many failed attempts. Please try again in {minutes} minute(s).",
    ),
    "session_expired": ("सत्र समाप्त", "Your session has expired. Please log in again."),
    "logged_out": ("लॉग आउट", "Signed out."),
    "export_empty": ("कोई डेटा नहीं", "No registrations available to export"),
}


def bilingual(key: str, **params) -> str:
    hindi, english = MESSAGES[key]
    return f"{hindi} / {english.format(**params)}"
