# shop_admin/constants.py
"""Conversation states and handler groups"""

(
    WAITING_LOGIN_EMAIL,
    WAITING_LOGIN_PASSWORD,
) = range(2)

(
    WAITING_STATUS_REASON,
) = range(10, 11)

(
    WAITING_REJECTION_REASON,
) = range(20, 21)

(
    WAITING_TIER_NAME,
    WAITING_TIER_COMMISSION,
    WAITING_TIER_PURCHASES,
) = range(30, 33)

(
    WAITING_CATEGORY_NAME,
    WAITING_CATEGORY_DESCRIPTION,
) = range(40, 42)

(
    WAITING_CUSTOMER_FIELD,
) = range(50, 51)

(
    WAITING_PRODUCT_NAME,
    WAITING_PRODUCT_DESCRIPTION,
    WAITING_PRODUCT_CATEGORY,
    WAITING_PRODUCT_DISCOUNT,
    WAITING_PRODUCT_INVENTORY,
    WAITING_PRODUCT_FIELD,
) = range(60, 66)

# Handler groups: plain handlers stay in group 0, each conversation has its own
(
    LOGIN_GROUP,
    CUSTOMER_STATUS_GROUP,
    CUSTOMER_EDIT_GROUP,
    PRODUCT_ADD_GROUP,
    PRODUCT_EDIT_GROUP,
    CATEGORY_ADD_GROUP,
    KOL_STATUS_GROUP,
    KOL_REJECT_GROUP,
    TIER_FORM_GROUP,
    REVIEW_REJECT_GROUP,
) = range(1, 11)
