import unittest
from datetime import datetime, timezone
from unittest.mock import patch

from tests.base import VALID_CPF, ApiTestCase

from anamnese_api.infra.models import FichaAnamneseORM
from anamnese_api.services.clients_service import normalize_page, normalize_page_size, normalize_search_limit


class PaginationHelperTests(unittest.TestCase):
    def test_page_size_clamped_to_allowed(self):
        self.assertEqual(normalize_page_size(999), 100)
        self.assertEqual(normalize_page_size(20), 20)
        self.assertEqual(normalize_page_size(50), 50)
        self.assertEqual(normalize_page_size(30), 20)
        self.assertEqual(normalize_page_size(35), 20)
        self.assertEqual(normalize_page_size(40), 50)
        self.assertEqual(normalize_page_size(75), 50)
        self.assertEqual(normalize_page_size(80), 100)
        self.assertEqual(normalize_page_size(0), 20)
        self.assertEqual(normalize_page_size(None), 20)

    def test_page_at_least_one(self):
        self.assertEqual(normalize_page(0), 1)
        self.assertEqual(normalize_page(-5), 1)
        self.assertEqual(normalize_page(None), 1)
        self.assertEqual(normalize_page(3), 3)

    def test_query_string_values(self):
        self.assertEqual(normalize_page("3"), 3)
        self.assertEqual(normalize_page("x"), 1)
        self.assertEqual(normalize_page("-2"), 1)
        self.assertEqual(normalize_page("²"), 1)
        self.assertEqual(normalize_page_size("50"), 50)
        self.assertEqual(normalize_page_size("abc"), 20)
        self.assertEqual(normalize_page_size(""), 20)
        self.assertEqual(normalize_page_size("1.5"), 20)
        self.assertEqual(normalize_search_limit("abc"), 10)
        self.assertEqual(normalize_search_limit("5"), 5)

    def test_search_limit(self):
        self.assertEqual(normalize_search_limit(None), 10)
        self.assertEqual(normalize_search_limit(0), 1)
        self.assertEqual(normalize_search_limit(500), 50)


class ClientsApiTests(ApiTestCase):
    def add_ficha(self, nome, cpf, professional_id=None, **dados):
        with self.SessionLocal() as db:
            ficha = FichaAnamneseORM(
                nome=nome,
                cpf=cpf,
                dados_cliente=dados,
                avaliacao={},
                info_tattoo={},
                termos="S",
                data_preenchimento_ficha=datetime.now(timezone.utc),
                id_profissional=professional_id,
            )
            db.add(ficha)
            db.commit()
            return ficha.id

    # listagem
    def test_list_requires_authentication(self):
        response = self.client.get("/clients")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"success": False, "message": "Autenticação necessária"})

    def test_list_sorted_filtered_and_scoped(self):
        p1 = self.create_professional(email="p1@example.com")
        p2 = self.create_professional(email="p2@example.com")
        self.add_ficha("bruno", "11144477735", p1.id, email="bruno@example.com")
        self.add_ficha("Ana", "52998224725", p1.id, celular="11999998888", dataNascimento="1990-01-01")
        self.add_ficha("   ", "39053344705", p1.id)
        self.add_ficha("Carla", "  ", p1.id)
        self.add_ficha("Outro", "52998224725", p2.id)

        response = self.client.get("/clients", headers=self.auth_headers(p1))
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual([c["nome"] for c in body["data"]], ["Ana", "bruno"])
        self.assertEqual(body["pagination"], {"page": 1, "limit": 20, "total": 2, "totalPages": 1})

        ana = body["data"][0]
        self.assertEqual(ana["cpf"], VALID_CPF)
        self.assertEqual(ana["cpfFormatado"], "529.982.247-25")
        self.assertEqual(ana["celular"], "11999998888")
        self.assertEqual(ana["dataNascimento"], "1990-01-01")
        self.assertIsNone(ana["email"])

    def test_list_pagination_params(self):
        p1 = self.create_professional()
        self.add_ficha("Ana", VALID_CPF, p1.id)

        response = self.client.get("/clients?page=0&limit=999", headers=self.auth_headers(p1))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["pagination"]["page"], 1)
        self.assertEqual(response.json()["pagination"]["limit"], 100)

        response = self.client.get("/clients?page=5&limit=50", headers=self.auth_headers(p1))
        body = response.json()
        self.assertEqual(body["data"], [])
        self.assertEqual(body["pagination"]["total"], 1)
        self.assertEqual(body["pagination"]["totalPages"], 1)

    def test_list_non_numeric_pagination_falls_back(self):
        p1 = self.create_professional()
        self.add_ficha("Ana", VALID_CPF, p1.id)

        response = self.client.get("/clients?limit=abc&page=x", headers=self.auth_headers(p1))
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertEqual(body["pagination"]["page"], 1)
        self.assertEqual(body["pagination"]["limit"], 20)
        self.assertEqual([c["nome"] for c in body["data"]], ["Ana"])

    def test_list_other_professional_forbidden(self):
        p1 = self.create_professional(email="p1@example.com")
        p2 = self.create_professional(email="p2@example.com")
        response = self.client.get(f"/clients?professionalId={p2.id}", headers=self.auth_headers(p1))
        self.assertEqual(response.status_code, 403)

    def test_list_token_for_deleted_professional(self):
        from types import SimpleNamespace

        ghost = SimpleNamespace(id=404, nome="x", email="x@example.com")
        response = self.client.get("/clients", headers=self.auth_headers(ghost))
        self.assertEqual(response.status_code, 401)

    def test_list_empty(self):
        p1 = self.create_professional()
        body = self.client.get("/clients", headers=self.auth_headers(p1)).json()
        self.assertEqual(body["message"], "Nenhum cliente cadastrado")
        self.assertEqual(body["pagination"]["totalPages"], 0)

    # consulta
    def test_lookup_by_cpf_and_id(self):
        ficha_id = self.add_ficha("Ana", VALID_CPF, email="ana@example.com")

        response = self.client.get("/clients", params={"cpf": "529.982.247-25"})
        self.assertEqual(response.status_code, 200, response.text)
        data = response.json()["data"]
        self.assertEqual(data["id"], ficha_id)
        self.assertEqual(data["dadosCliente"]["email"], "ana@example.com")
        self.assertEqual(data["termos"], "S")
        self.assertIsNone(data["professionalId"])

        response = self.client.get("/clients", params={"id": ficha_id})
        self.assertEqual(response.json()["data"]["nome"], "Ana")

    def test_lookup_not_found(self):
        response = self.client.get("/clients", params={"cpf": VALID_CPF})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"success": True, "message": "Cliente não encontrado", "data": None})

    def test_lookup_bad_cpf(self):
        response = self.client.get("/clients", params={"cpf": "123"})
        self.assertEqual(response.status_code, 400)

    def test_lookup_scoped_to_token(self):
        p1 = self.create_professional(email="p1@example.com")
        p2 = self.create_professional(email="p2@example.com")
        self.add_ficha("Ana", VALID_CPF, p2.id)
        response = self.client.get("/clients", params={"cpf": VALID_CPF}, headers=self.auth_headers(p1))
        self.assertIsNone(response.json()["data"])

    # busca
    def search(self, professional, **params):
        return self.client.get("/clients/search", params=params, headers=self.auth_headers(professional))

    def test_search_requires_authentication(self):
        self.add_ficha("Maria da Silva", VALID_CPF, email="maria@example.com")
        response = self.client.get("/clients/search", params={"q": "maria"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"success": False, "message": "Autenticação necessária"})

    def test_search_short_query_skips_store(self):
        p1 = self.create_professional()
        with patch("anamnese_api.services.clients_service.search_clients") as search:
            response = self.search(p1, q="a")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"], [])
        search.assert_not_called()

    def test_search_by_name_and_cpf(self):
        p1 = self.create_professional()
        self.add_ficha("Mariana Souza", VALID_CPF, p1.id)
        self.add_ficha("Ana Maria", "11144477735", p1.id)
        self.add_ficha("Bruno", "39053344705", p1.id)

        body = self.search(p1, q="mari").json()
        self.assertEqual([c["nome"] for c in body["data"]], ["Ana Maria", "Mariana Souza"])

        body = self.search(p1, q="444").json()
        self.assertEqual([c["nome"] for c in body["data"]], ["Ana Maria"])

        body = self.search(p1, q="529.982").json()
        self.assertEqual([c["nome"] for c in body["data"]], ["Mariana Souza"])

    def test_search_scoped_to_professional(self):
        p1 = self.create_professional(email="p1@example.com")
        p2 = self.create_professional(email="p2@example.com")
        self.add_ficha("Maria da Silva", VALID_CPF, p1.id)
        self.add_ficha("Maria Souza", "11144477735", p2.id)
        self.add_ficha("Maria Sem Profissional", "39053344705")

        body = self.search(p1, q="maria").json()
        self.assertEqual([c["nome"] for c in body["data"]], ["Maria da Silva"])

    def test_search_wildcards_are_literal(self):
        p1 = self.create_professional()
        self.add_ficha("Ana", VALID_CPF, p1.id)
        self.add_ficha("Bruno", "11144477735", p1.id)

        for q in ("__", "%%", "a%"):
            body = self.search(p1, q=q).json()
            self.assertEqual(body["data"], [], q)

        self.add_ficha("Ana_Paula", "39053344705", p1.id)
        body = self.search(p1, q="a_p").json()
        self.assertEqual([c["nome"] for c in body["data"]], ["Ana_Paula"])

    def test_search_limit_and_empty(self):
        p1 = self.create_professional()
        for i, cpf in enumerate(["52998224725", "11144477735", "39053344705"]):
            self.add_ficha(f"Cliente {i}", cpf, p1.id)
        body = self.search(p1, q="cliente", limit=2).json()
        self.assertEqual(len(body["data"]), 2)

        body = self.search(p1, q="cliente", limit="abc").json()
        self.assertEqual(len(body["data"]), 3)

        body = self.search(p1, q="zzz").json()
        self.assertEqual(body["data"], [])
        self.assertEqual(body["message"], "Nenhum cliente encontrado")
