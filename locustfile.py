from locust import HttpUser, task, between
import random

API = "/api/v1"


class Shopper(HttpUser):
    wait_time = between(0.1, 0.5)

    def on_start(self):
        # Register and log in a user for this simulated client
        email = f"shopper_{random.randint(1, 1_000_000)}@example.com"
        self.user_id = None
        self.headers = {}
        r = self.client.post(
            f"{API}/users",
            json={"firstName": "Load", "lastName": "Test", "email": email, "password": "loadtest"},
        )
        if r.status_code != 201:
            return
        r = self.client.post(f"{API}/authenticate", json={"email": email, "password": "loadtest"})
        if r.status_code == 200:
            self.user_id = r.json()["user"]["id"]
            self.headers = {"Authorization": f"Bearer {r.json()['token']}"}

    @task(3)
    def browse_products(self):
        self.client.get(f"{API}/products")

    @task(1)
    def browse_categories(self):
        self.client.get(f"{API}/categories")

    @task(2)
    def shop(self):
        if not self.user_id:
            return
        orders_url = f"{API}/users/{self.user_id}/orders"
        r = self.client.get(orders_url, params={"status": "active"}, headers=self.headers, name="orders?status=active")
        if r.status_code != 200:
            return
        if r.json():
            order_id = r.json()[0]["id"]
        else:
            r = self.client.post(orders_url, headers=self.headers, name="create order")
            if r.status_code != 201:
                return
            order_id = r.json()["id"]

        products = self.client.get(f"{API}/products").json()
        if products:
            product = random.choice(products)
            self.client.post(
                f"{orders_url}/{order_id}/items",
                json={"productId": product["id"], "quantity": random.randint(1, 3)},
                headers=self.headers,
                name="add item",
            )
        self.client.put(f"{orders_url}/{order_id}", json={"status": "complete"}, headers=self.headers, name="complete order")
