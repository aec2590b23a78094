import asyncio

from loopcart.config import load_client_settings
from loopcart_sdk import StoreClient


async def main():
    c = StoreClient(base_url=load_client_settings().api_url)
    user_id = "concurrent-user"
    c.clear_cart(user_id)

    # Fire many adds for the same line at once; every one must land.
    print("\n⚡ Simulating concurrent adds...")
    responses = await asyncio.gather(*[c.add_to_cart_async(user_id, 3, 1) for _ in range(20)])
    print("statuses:", sorted({r.status_code for r in responses}))

    cart = c.view_cart(user_id)
    print("🛒 Final cart:", cart)
    qty = cart[0]["quantity"] if cart else 0
    print("✅ quantity is 20" if qty == 20 else f"❌ expected 20, got {qty}")


if __name__ == "__main__":
    asyncio.run(main())
