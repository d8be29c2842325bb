NIGERIAN_STATES = [
    {"name": "Abia", "code": "AB"},
    {"name": "Adamawa", "code": "AD"},
    {"name": "Akwa Ibom", "code": "AK"},
    {"name": "Anambra", "code": "AN"},
    {"name": "Bauchi", "code": "BA"},
    {"name": "Bayelsa", "code": "BY"},
    {"name": "Benue", "code": "BE"},
    {"name": "Borno", "code": "BO"},
    {"name": "Cross River", "code": "CR"},
    {"name": "Delta", "code": "DE"},
    {"name": "Ebonyi", "code": "EB"},
    {"name": "Edo", "code": "ED"},
    {"name": "Ekiti", "code": "EK"},
    {"name": "Enugu", "code": "EN"},
    {"name": "Federal Capital Territory", "code": "FC"},
    {"name": "Gombe", "code": "GO"},
    {"name": "Imo", "code": "IM"},
    {"name": "Jigawa", "code": "JI"},
    {"name": "Kaduna", "code": "KD"},
    {"name": "Kano", "code": "KN"},
    {"name": "Katsina", "code": "KT"},
    {"name": "Kebbi", "code": "KE"},
    {"name": "Kogi", "code": "KO"},
    {"name": "Kwara", "code": "KW"},
    {"name": "Lagos", "code": "LA"},
    {"name": "Nasarawa", "code": "NA"},
    {"name": "Niger", "code": "NI"},
    {"name": "Ogun", "code": "OG"},
    {"name": "Ondo", "code": "ON"},
    {"name": "Osun", "code": "OS"},
    {"name": "Oyo", "code": "OY"},
    {"name": "Plateau", "code": "PL"},
    {"name": "Rivers", "code": "RI"},
    {"name": "Sokoto", "code": "SO"},
    {"name": "Taraba", "code": "TA"},
    {"name": "Yobe", "code": "YO"},
    {"name": "Zamfara", "code": "ZA"},
]

MAJOR_CROPS = [
    "Rice", "Maize", "Cassava", "Yam", "Plantain", "Cocoa", "Palm Oil", "Sorghum",
    "Millet", "Groundnut", "Soybean", "Cowpea", "Sweet Potato", "Irish Potato",
    "Tomato", "Pepper", "Onion", "Garlic", "Ginger", "Turmeric", "Cotton",
    "Sugarcane", "Tobacco", "Kola Nut", "Cashew", "Mango", "Orange", "Banana",
    "Pineapple", "Watermelon", "Melon", "Cucumber", "Carrot", "Cabbage", "Lettuce",
    "Spinach", "Okra", "Eggplant", "Green Beans", "Peas",
]

QUALITY_GRADES = ["premium", "grade_a", "grade_b", "grade_c"]

MEASUREMENT_UNITS = ["bags", "tonnes", "kilograms"]

CERTIFICATIONS = [
    "Organic", "NAFDAC", "SON", "ISO_9001", "HACCP", "GMP", "Fair_Trade",
    "Rainforest_Alliance", "UTZ_Certified", "Global_GAP",
]

STORAGE_METHODS = [
    "Warehouse", "Silo", "Cold_Storage", "Refrigerated", "Dry_Storage",
    "Controlled_Atmosphere", "Modified_Atmosphere", "Vacuum_Packed",
    "Bulk_Storage", "Container_Storage",
]

CURRENCY = "₦"

# Typical market price per kg, in Naira
PRICE_RANGES = {
    "Rice": {"min": 400, "max": 800},
    "Maize": {"min": 200, "max": 400},
    "Cassava": {"min": 50, "max": 150},
    "Yam": {"min": 300, "max": 600},
    "Plantain": {"min": 100, "max": 300},
    "Cocoa": {"min": 800, "max": 1500},
    "Palm Oil": {"min": 600, "max": 1200},
    "Sorghum": {"min": 150, "max": 300},
    "Millet": {"min": 150, "max": 300},
    "Groundnut": {"min": 400, "max": 800},
    "Soybean": {"min": 300, "max": 600},
    "Cowpea": {"min": 200, "max": 400},
}
