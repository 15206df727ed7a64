"""
Firm details shown on the public site.
"""
from __future__ import annotations

FIRM_NAME = "MBS Advocates"

FIRM_TAGLINE = (
    "MBS Advocates is a dynamic and client-focused law firm dedicated to providing exceptional legal services. "
    "Founded on principles of integrity, professionalism, and a deep understanding of the law, we strive to "
    "deliver practical and effective solutions tailored to our clients' unique needs."
)

FIRM_ADDRESS = (
    "Plot 26, Wampewo Avenue, Bakwanye House Level 2, West Wing, Opp. Hotel Africana, "
    "P.O.Box 111165, Kampala, Uganda"
)

FIRM_PHONES = ("+256 772 843 238", "+256 702 672 369")

FIRM_EMAILS = ("info@mbsadvocates.com", "mbsadvocatessolicitors@gmail.com")

FIRM_X_HANDLE = "@mbsLawyers"
FIRM_X_URL = "https://x.com/mbsLawyers"

MAP_EMBED_URL = (
    "https://www.google.com/maps/embed?pb=!1m18!1m12!1m3!1d3989.7590000000005!2d32.589000000000004"
    "!3d0.31500000000000006!2m3!1f0!2f0!3f0!3m2!1i1024!2i768!4f13.1!3m3!1m2!1s0x0%3A0x0"
    "!2zM%C2%B0MTgnNTQuMCJOIDMy%C2%B0MzUnMjAuNCJF!5e0!3m2!1sen!2sug!4v1678912345678!5m2!1sen!2sug"
)

# Shown when a team member has no photo.
PLACEHOLDER_IMAGE = "/static/placeholder.svg"
