APPOINTMENT_SERVICES = [
    "Box Braids",
    "Knotless Braids",
    "Cornrows",
    "Passion Twists",
    "Faux Locs",
    "Natural Hair Styling",
    "Wash & Condition",
    "Wig Installation",
    "Weave Installation",
    "Bridal Hair",
    "Special Occasion",
    "Other",
]

TIME_SLOTS = [
    "9:00 AM",
    "10:00 AM",
    "11:00 AM",
    "12:00 PM",
    "1:00 PM",
    "2:00 PM",
    "3:00 PM",
    "4:00 PM",
    "5:00 PM",
]

STYLE_CATEGORIES = [
    "Braids",
    "Natural Hair",
    "Weaves & Wigs",
    "Special Occasion",
]

PRICE_CATEGORIES = STYLE_CATEGORIES + ["Treatments", "Other"]

# Table / bucket names on the Supabase project
TABLE_APPOINTMENTS = "appointments"
TABLE_GALLERY_STYLES = "gallery_styles"
TABLE_PRICE_LIST = "price_list"
TABLE_CUSTOMER_RECORDS = "customer_records"
TABLE_USER_ROLES = "user_roles"

ADMIN_ROLE = "admin"
