# storefront/queries/storefront.py
"""
Storefront API documents (catalog, carts, legacy customer accounts).

Each operation is named so it can be identified in upstream logs.
"""

MONEY_FIELDS = "amount currencyCode"

CART_FRAGMENT = f"""
fragment CartFields on Cart {{
  id
  checkoutUrl
  totalQuantity
  updatedAt
  cost {{
    subtotalAmount {{ {MONEY_FIELDS} }}
    totalAmount {{ {MONEY_FIELDS} }}
    totalTaxAmount {{ {MONEY_FIELDS} }}
  }}
  lines(first: 100) {{
    edges {{
      node {{
        id
        quantity
        merchandise {{
          ... on ProductVariant {{
            id
            title
            price {{ {MONEY_FIELDS} }}
            product {{
              title
              handle
              images(first: 1) {{
                edges {{ node {{ url altText width height }} }}
              }}
            }}
          }}
        }}
      }}
    }}
  }}
}}
"""

PRODUCT_FRAGMENT = f"""
fragment ProductFields on Product {{
  id
  handle
  title
  description
  descriptionHtml
  availableForSale
  priceRange {{
    minVariantPrice {{ {MONEY_FIELDS} }}
    maxVariantPrice {{ {MONEY_FIELDS} }}
  }}
  images(first: 10) {{
    edges {{ node {{ url altText width height }} }}
  }}
  options {{
    id
    name
    values
  }}
  variants(first: 50) {{
    edges {{
      node {{
        id
        title
        availableForSale
        price {{ {MONEY_FIELDS} }}
        compareAtPrice {{ {MONEY_FIELDS} }}
        selectedOptions {{ name value }}
      }}
    }}
  }}
}}
"""

# ---- Catalog ----

GET_PRODUCTS = """
query GetProducts($first: Int!, $after: String) {
  products(first: $first, after: $after) {
    pageInfo { hasNextPage endCursor }
    edges { node { ...ProductFields } }
  }
}
""" + PRODUCT_FRAGMENT

GET_PRODUCT_BY_HANDLE = """
query GetProductByHandle($handle: String!) {
  product(handle: $handle) { ...ProductFields }
}
""" + PRODUCT_FRAGMENT

GET_COLLECTIONS = """
query GetCollections($first: Int!) {
  collections(first: $first) {
    edges {
      node {
        id
        handle
        title
        description
        image { url altText width height }
      }
    }
  }
}
"""

GET_COLLECTION_PRODUCTS = """
query GetCollectionProducts($handle: String!, $first: Int!, $after: String) {
  collection(handle: $handle) {
    id
    handle
    title
    description
    image { url altText width height }
    products(first: $first, after: $after) {
      pageInfo { hasNextPage endCursor }
      edges { node { ...ProductFields } }
    }
  }
}
""" + PRODUCT_FRAGMENT

# ---- Cart ----

GET_CART = """
query GetCart($cartId: ID!) {
  cart(id: $cartId) { ...CartFields }
}
""" + CART_FRAGMENT

CREATE_CART = """
mutation CartCreate($lines: [CartLineInput!]) {
  cartCreate(input: { lines: $lines }) {
    cart { ...CartFields }
    userErrors { field message }
  }
}
""" + CART_FRAGMENT

ADD_TO_CART = """
mutation CartLinesAdd($cartId: ID!, $lines: [CartLineInput!]!) {
  cartLinesAdd(cartId: $cartId, lines: $lines) {
    cart { ...CartFields }
    userErrors { field message }
  }
}
""" + CART_FRAGMENT

UPDATE_CART = """
mutation CartLinesUpdate($cartId: ID!, $lines: [CartLineUpdateInput!]!) {
  cartLinesUpdate(cartId: $cartId, lines: $lines) {
    cart { ...CartFields }
    userErrors { field message }
  }
}
""" + CART_FRAGMENT

REMOVE_FROM_CART = """
mutation CartLinesRemove($cartId: ID!, $lineIds: [ID!]!) {
  cartLinesRemove(cartId: $cartId, lineIds: $lineIds) {
    cart { ...CartFields }
    userErrors { field message }
  }
}
""" + CART_FRAGMENT

# ---- Legacy customer accounts (Storefront customer tokens) ----

CUSTOMER_ACCESS_TOKEN_CREATE = """
mutation CustomerAccessTokenCreate($input: CustomerAccessTokenCreateInput!) {
  customerAccessTokenCreate(input: $input) {
    customerAccessToken { accessToken expiresAt }
    customerUserErrors { code field message }
  }
}
"""

CUSTOMER_CREATE = """
mutation CustomerCreate($input: CustomerCreateInput!) {
  customerCreate(input: $input) {
    customer { id email firstName lastName }
    customerUserErrors { code field message }
  }
}
"""

CUSTOMER_RECOVER = """
mutation CustomerRecover($email: String!) {
  customerRecover(email: $email) {
    customerUserErrors { code field message }
  }
}
"""
