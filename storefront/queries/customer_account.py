# storefront/queries/customer_account.py
"""Customer Account API documents (authenticated customer data)."""

ADDRESS_FIELDS = """
  id
  formatted
  firstName
  lastName
  company
  address1
  address2
  city
  province
  zip
  country
  phoneNumber
"""

GET_CUSTOMER = """
query GetCustomer {
  customer {
    id
    firstName
    lastName
    displayName
    creationDate
    emailAddress { emailAddress marketingState }
    phoneNumber { phoneNumber }
  }
}
"""

GET_CUSTOMER_ADDRESSES = f"""
query GetCustomerAddresses {{
  customer {{
    id
    defaultAddress {{ id }}
    addresses(first: 50) {{
      edges {{ node {{ {ADDRESS_FIELDS} }} }}
    }}
  }}
}}
"""

GET_CUSTOMER_ORDERS = """
query GetCustomerOrders($first: Int!, $after: String) {
  customer {
    id
    orders(first: $first, after: $after) {
      pageInfo { hasNextPage endCursor }
      edges {
        node {
          id
          name
          number
          processedAt
          financialStatus
          fulfillments(first: 1) { edges { node { status } } }
          totalPrice { amount currencyCode }
          lineItems(first: 10) {
            edges {
              node {
                id
                title
                quantity
                variantTitle
                image { url altText }
              }
            }
          }
        }
      }
    }
  }
}
"""

GET_CUSTOMER_ORDER = """
query GetCustomerOrder($orderId: ID!) {
  order(id: $orderId) {
    id
    name
    number
    processedAt
    financialStatus
    subtotal { amount currencyCode }
    totalTax { amount currencyCode }
    totalPrice { amount currencyCode }
    shippingAddress { formatted }
    lineItems(first: 100) {
      edges {
        node {
          id
          title
          quantity
          variantTitle
          price { amount currencyCode }
          image { url altText }
        }
      }
    }
  }
}
"""

UPDATE_CUSTOMER = """
mutation CustomerUpdate($input: CustomerUpdateInput!) {
  customerUpdate(input: $input) {
    customer { id firstName lastName displayName }
    userErrors { field message }
  }
}
"""

CREATE_ADDRESS = f"""
mutation CustomerAddressCreate($address: CustomerAddressInput!, $defaultAddress: Boolean) {{
  customerAddressCreate(address: $address, defaultAddress: $defaultAddress) {{
    customerAddress {{ {ADDRESS_FIELDS} }}
    userErrors {{ field message }}
  }}
}}
"""

UPDATE_ADDRESS = f"""
mutation CustomerAddressUpdate($addressId: ID!, $address: CustomerAddressInput, $defaultAddress: Boolean) {{
  customerAddressUpdate(addressId: $addressId, address: $address, defaultAddress: $defaultAddress) {{
    customerAddress {{ {ADDRESS_FIELDS} }}
    userErrors {{ field message }}
  }}
}}
"""

DELETE_ADDRESS = """
mutation CustomerAddressDelete($addressId: ID!) {
  customerAddressDelete(addressId: $addressId) {
    deletedAddressId
    userErrors { field message }
  }
}
"""
