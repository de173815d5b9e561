"""Unit tests for bridge API routes."""

import unittest
from unittest.mock import AsyncMock

from fastapi import FastAPI
from fastapi.testclient import TestClient

from tokenbridge.api.bridge_api.dependencies import (
    get_administration_service,
    get_caller,
    get_conversion_service,
    get_native_vault_service,
)
from tokenbridge.api.bridge_api.errors import bridge_error_handler
from tokenbridge.api.bridge_api.routers import (
    administration,
    configuration,
    conversions,
    native_vault,
    ownership,
)
from tokenbridge.application.bridge.dtos import (
    AuthorizerDTO,
    CommissionSettingsDTO,
    ConversionOutResponseDTO,
    NativeCommissionClaimDTO,
    NativeVaultDTO,
    OwnershipDTO,
)
from tokenbridge.domain.bridge.entities import (
    CommissionMode,
    ConversionDirection,
    ConversionOutEvent,
)
from tokenbridge.domain.errors import (
    BridgeError,
    BridgeNotInitialized,
    CallerNotOwner,
    ConversionFailed,
    NotEnoughBalance,
    UsedSignature,
    ViolationOfTxAmountLimits,
)

CALLER = "0x7E5F4552091A69125d5DfCb7b8C2659029395Bdf"
CONVERSION_ID = "0x" + "11" * 32
SIGNATURE = {"v": 27, "r": "0x" + "22" * 32, "s": "0x" + "33" * 32}


class BridgeRouterTestCase(unittest.TestCase):
    def setUp(self):
        """Set up the app with every bridge router and mocked services."""
        self.app = FastAPI()
        self.app.add_exception_handler(BridgeError, bridge_error_handler)
        for module in (conversions, configuration, native_vault, administration, ownership):
            self.app.include_router(module.router, prefix="/api/v1/bridge")

        self.conversion_service = AsyncMock()
        self.admin_service = AsyncMock()
        self.vault_service = AsyncMock()

        self.app.dependency_overrides[get_caller] = lambda: CALLER
        self.app.dependency_overrides[get_conversion_service] = (
            lambda: self.conversion_service
        )
        self.app.dependency_overrides[get_administration_service] = (
            lambda: self.admin_service
        )
        self.app.dependency_overrides[get_native_vault_service] = (
            lambda: self.vault_service
        )

        self.client = TestClient(self.app)

    def tearDown(self):
        self.app.dependency_overrides.clear()


class TestConversionRoutes(BridgeRouterTestCase):
    def out_payload(self):
        return {
            "amount": 1000,
            "conversion_id": CONVERSION_ID,
            "signature": SIGNATURE,
        }

    def test_conversion_out_success(self):
        event = ConversionOutEvent(
            caller=CALLER, amount=1000, conversion_id=CONVERSION_ID, digest="0xabc"
        )
        self.conversion_service.conversion_out.return_value = ConversionOutResponseDTO(
            direction=ConversionDirection.OUT,
            caller=CALLER,
            counterparty=CALLER,
            amount=1000,
            conversion_id=CONVERSION_ID,
            digest="0xabc",
            token_commission=100,
            receiver_share=20,
            bridge_owner_share=80,
            native_commission=0,
            net_amount=900,
            event=event,
        )

        response = self.client.post(
            "/api/v1/bridge/conversions/out", json=self.out_payload()
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["net_amount"], 900)
        self.assertEqual(response.json()["event"]["caller"], CALLER)
        caller, dto = self.conversion_service.conversion_out.call_args.args
        self.assertEqual(caller, CALLER)
        self.assertEqual(dto.amount, 1000)
        self.assertEqual(dto.native_payment, 0)

    def test_conversion_out_rejects_malformed_payload(self):
        payload = self.out_payload()
        payload["conversion_id"] = "0x1234"
        response = self.client.post("/api/v1/bridge/conversions/out", json=payload)
        self.assertEqual(response.status_code, 422)
        self.conversion_service.conversion_out.assert_not_called()

    def test_error_families_map_to_status_codes(self):
        cases = [
            (UsedSignature(), 409, "UsedSignature"),
            (ViolationOfTxAmountLimits(), 422, "ViolationOfTxAmountLimits"),
            (ConversionFailed(), 502, "ConversionFailed"),
            (BridgeNotInitialized(), 400, "BridgeNotInitialized"),
        ]
        for error, status_code, code in cases:
            with self.subTest(code=code):
                self.conversion_service.conversion_out.side_effect = error
                response = self.client.post(
                    "/api/v1/bridge/conversions/out", json=self.out_payload()
                )
                self.assertEqual(response.status_code, status_code)
                self.assertEqual(response.json()["code"], code)

    def test_unexpected_error_is_500(self):
        self.conversion_service.conversion_in.side_effect = RuntimeError("boom")
        payload = self.out_payload()
        payload["recipient"] = CALLER
        response = self.client.post("/api/v1/bridge/conversions/in", json=payload)
        self.assertEqual(response.status_code, 500)
        self.assertIn("boom", response.json()["detail"])


class TestAdministrationRoutes(BridgeRouterTestCase):
    def settings(self, **overrides):
        values = dict(
            enabled=True,
            mode=CommissionMode.FIXED_TOKEN,
            receiver_proportion=20,
            bridge_owner_proportion=80,
            percentage_numerator=0,
            percentage_offset_points=0,
            percentage_limit=100,
            fixed_token_amount=5,
            fixed_native_amount=0,
            fixed_native_limit=1000,
        )
        values.update(overrides)
        return CommissionSettingsDTO(**values)

    def test_update_authorizer(self):
        self.admin_service.update_authorizer.return_value = AuthorizerDTO(
            authorizer=CALLER
        )
        response = self.client.put(
            "/api/v1/bridge/admin/authorizer", json={"authorizer": CALLER.lower()}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["authorizer"], CALLER)
        caller, dto = self.admin_service.update_authorizer.call_args.args
        self.assertEqual(dto.authorizer, CALLER)

    def test_non_owner_is_forbidden(self):
        self.admin_service.enable_and_update_fixed_tokens_commission.side_effect = (
            CallerNotOwner()
        )
        response = self.client.post(
            "/api/v1/bridge/admin/commission/fixed-token", json={"amount": 5}
        )
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["code"], "CallerNotOwner")

    def test_fixed_token_commission(self):
        self.admin_service.enable_and_update_fixed_tokens_commission.return_value = (
            self.settings()
        )
        response = self.client.post(
            "/api/v1/bridge/admin/commission/fixed-token", json={"amount": 5}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["mode"], "fixed_token")

    def test_disable_commission_takes_no_body(self):
        self.admin_service.disable_commission.return_value = self.settings(
            enabled=False, mode=CommissionMode.DISABLED, fixed_token_amount=0
        )
        response = self.client.post("/api/v1/bridge/admin/commission/disable")
        self.assertEqual(response.status_code, 200)
        self.admin_service.disable_commission.assert_called_once_with(CALLER)

    def test_reads(self):
        self.admin_service.get_commission_settings.return_value = self.settings()
        self.admin_service.get_native_vault.return_value = NativeVaultDTO(balance=7)
        self.admin_service.get_ownership.return_value = OwnershipDTO(owner=CALLER)

        self.assertEqual(
            self.client.get("/api/v1/bridge/commission").json()["fixed_token_amount"], 5
        )
        self.assertEqual(
            self.client.get("/api/v1/bridge/commission/native-vault").json()["balance"], 7
        )
        self.assertEqual(self.client.get("/api/v1/bridge/ownership").json()["owner"], CALLER)


class TestOwnershipAndVaultRoutes(BridgeRouterTestCase):
    def test_transfer_and_accept(self):
        self.admin_service.transfer_ownership.return_value = OwnershipDTO(
            owner=CALLER, pending_owner=CALLER
        )
        self.admin_service.accept_ownership.return_value = OwnershipDTO(owner=CALLER)

        response = self.client.post(
            "/api/v1/bridge/ownership/transfer", json={"new_owner": CALLER}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["pending_owner"], CALLER)

        response = self.client.post("/api/v1/bridge/ownership/accept")
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.json()["pending_owner"])

    def test_claim(self):
        self.vault_service.claim_fixed_native_tokens_commission.return_value = (
            NativeCommissionClaimDTO(receiver=CALLER, amount=400)
        )
        response = self.client.post("/api/v1/bridge/commission/native-vault/claim")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["amount"], 400)

    def test_claim_empty_vault_conflict(self):
        self.vault_service.claim_fixed_native_tokens_commission.side_effect = (
            NotEnoughBalance()
        )
        response = self.client.post("/api/v1/bridge/commission/native-vault/claim")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["code"], "NotEnoughBalance")


if __name__ == "__main__":
    unittest.main()
