"""
Recommendations Module Summary
==============================

This module stores the recommendations users share: places, products and
experiences with a rating, an optional pro tip, an optional location and
tags.

Key Features Implemented:
1. Recommendation, Category, Tag and CuratorRec models and migrations
2. Typed query filters combined with AND semantics
3. RecommendationRepository - read accessor used by the feed and map search
4. REST API endpoints with owner-only editing and private visibility
5. Admin-curated recommendation list
"""
