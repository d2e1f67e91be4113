"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from src.application.dto.requests import (
    AdjustStockRequest,
    CreateAssignmentRequest,
    CreateMaterialRequest,
    DeliveryConfirmationRequest,
    DeliveryLineRequest,
    InstallAssignmentRequest,
    ReceiveStockRequest,
    StockQuantityRequest,
    UpdateAssignmentRequest,
    UpdateMaterialRequest,
    UpdateStockSettingsRequest,
)
from src.application.dto.responses import (
    AssignmentListResponse,
    AssignmentResponse,
    DeleteStockResponse,
    DeliveryIntakeResponse,
    DeliveryLineResultResponse,
    ErrorResponse,
    HealthResponse,
    HistoryEntryResponse,
    InitializeStockResponse,
    InstallAssignmentResponse,
    LedgerOperationResponse,
    MaterialHistoryResponse,
    MaterialListResponse,
    MaterialResponse,
    ProviderHealthResponse,
    RegisterMaterialResponse,
    RemoveMaterialResponse,
    StockListResponse,
    StockResponse,
    StockSummaryResponse,
    TransactionResponse,
)

__all__ = [
    # Requests
    "AdjustStockRequest",
    "CreateAssignmentRequest",
    "CreateMaterialRequest",
    "DeliveryConfirmationRequest",
    "DeliveryLineRequest",
    "InstallAssignmentRequest",
    "ReceiveStockRequest",
    "StockQuantityRequest",
    "UpdateAssignmentRequest",
    "UpdateMaterialRequest",
    "UpdateStockSettingsRequest",
    # Responses
    "AssignmentListResponse",
    "AssignmentResponse",
    "DeleteStockResponse",
    "DeliveryIntakeResponse",
    "DeliveryLineResultResponse",
    "ErrorResponse",
    "HealthResponse",
    "HistoryEntryResponse",
    "InitializeStockResponse",
    "InstallAssignmentResponse",
    "LedgerOperationResponse",
    "MaterialHistoryResponse",
    "MaterialListResponse",
    "MaterialResponse",
    "ProviderHealthResponse",
    "RegisterMaterialResponse",
    "RemoveMaterialResponse",
    "StockListResponse",
    "StockResponse",
    "StockSummaryResponse",
    "TransactionResponse",
]
