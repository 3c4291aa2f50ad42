"""Centralized brand configuration for user-facing copy."""

BRAND_NAME = "CareerCrafter"
BRAND_DOMAIN = "careercrafter.app"
BRAND_PRODUCT_NAME = "CareerCrafter AI"
BRAND_APP_DESCRIPTION = "AI job matching and career assistant"
BRAND_ASSISTANT_NAME = f"{BRAND_NAME} AI"
