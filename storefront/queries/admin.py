# storefront/queries/admin.py

GET_SHOP_INFO = """
query GetShopInfo {
  shop {
    name
    primaryDomain { url }
  }
}
"""

GET_ADMIN_PRODUCTS = """
query GetAdminProducts($first: Int!, $after: String, $query: String) {
  products(first: $first, after: $after, query: $query) {
    pageInfo { hasNextPage endCursor }
    edges {
      node {
        id
        title
        handle
        status
        totalInventory
        updatedAt
      }
    }
  }
}
"""
