"""
요청 페이로드 생성
가격 계산 요청과 상품 저장 요청 데이터 구성
"""

import time
from typing import Any, Dict, List, Mapping, Optional, Sequence

from listing_pricing.domain.deliverables import BASE_CURRENCY, expand_all
from listing_pricing.models import Country, CountryDeliverable, ProductVariantRow


def _float(value) -> Optional[float]:
    return float(value) if value is not None else None


def _code(document: Optional[Mapping[str, Any]], key: str) -> str:
    """조회 문서의 참조 필드에서 code 추출 (populate 되지 않았으면 빈 문자열)"""
    if not document:
        return ""
    ref = document.get(key)
    if isinstance(ref, Mapping):
        return ref.get("code") or ""
    return ""


def _is_priced(row: ProductVariantRow, country: Country) -> bool:
    """USD 금액이 있어 계산 요청에 포함되는 국가인지 여부"""
    amount = row.price_for(country).amount
    return amount is not None and amount > 0


def countries_to_price(rows: Sequence[ProductVariantRow]) -> List[Country]:
    """계산 요청에 포함될 국가 목록 (Hongkong 우선)"""
    return [country for country in Country if any(_is_priced(row, country) for row in rows)]


def _calculation_deliverables(row: ProductVariantRow) -> List[Dict[str, Any]]:
    deliverables = []
    for country in Country:
        if not _is_priced(row, country):
            continue
        price = row.price_for(country)
        local = _float(price.local) or 0.0
        deliverables.append(
            {
                "country": country.value,
                "currency": BASE_CURRENCY,
                "basePrice": float(price.amount),
                "exchangeRate": _float(price.rate) or None,
                "usd": float(price.amount),
                "xe": _float(price.rate) or 0.0,
                "local": local,
                country.local_currency.lower(): local,
            }
        )
    return deliverables


def build_calculation_product(
    row: ProductVariantRow,
    sku_family: Optional[Mapping[str, Any]] = None,
    seller: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """
    가격 계산용 상품 데이터

    Args:
        row: 변형 행
        sku_family: SKU 패밀리 문서 (brand, productcategoriesId 참조 포함)
        seller: 판매자 문서

    Returns:
        계산 서비스에 보낼 상품 딕셔너리
    """
    product = row.model_dump(
        mode="json", by_alias=True, exclude={"country_deliverables", "prices"}
    )
    product.update(
        {
            "countryDeliverables": _calculation_deliverables(row),
            "sellerCode": (seller or {}).get("code") or "",
            "brandCode": _code(sku_family, "brand"),
            "productCategoryCode": _code(sku_family, "productcategoriesId"),
            "conditionCode": row.condition or "",
            "moq": row.moq_per_variant,
            "weight": _float(row.weight) or 0.0,
        }
    )
    return product


def new_group_code() -> str:
    return f"GROUP-{int(time.time() * 1000)}"


def _iso(value) -> str:
    return value.isoformat() if value else ""


def build_product_payload(
    row: ProductVariantRow,
    deliverables: Optional[Sequence[CountryDeliverable]] = None,
    group_code: Optional[str] = None,
    total_moq: Optional[int] = None,
) -> Dict[str, Any]:
    """
    상품 저장 요청 데이터

    Args:
        row: 정규화된 변형 행
        deliverables: 재조정된 계산 결과 (없으면 행에 연결된 결과 사용)
        group_code: 다중 변형 그룹 코드
        total_moq: 그룹 전체 최소 주문 수량

    Returns:
        저장 서비스에 보낼 상품 딕셔너리
    """
    if deliverables is None:
        deliverables = row.country_deliverables

    return {
        "skuFamilyId": row.sku_family_id,
        "gradeId": row.grade_id,
        "sellerId": row.supplier_id,
        "specification": row.sub_model_name or row.specification or "",
        "simType": row.sim or "",
        "color": row.colour or "",
        "ram": row.ram or "",
        "storage": row.storage or "",
        "weight": _float(row.weight),
        "condition": row.condition,
        "stock": row.total_qty,
        "country": row.country,
        "moq": row.moq_per_variant,
        "purchaseType": row.purchase_type,
        "isNegotiable": row.is_negotiable,
        "isFlashDeal": row.is_flash_deal,
        "startTime": _iso(row.start_time),
        "expiryTime": _iso(row.end_time),
        "groupCode": group_code,
        "sequence": row.sequence,
        "countryDeliverables": [d.to_payload() for d in expand_all(deliverables)],
        "packing": row.packing or "",
        "currentLocation": row.current_location or "",
        "deliveryLocation": row.delivery_location,
        "paymentTerm": list(row.payment_term),
        "paymentMethod": list(row.payment_method),
        "shippingTime": row.shipping_time or "",
        "totalMoq": total_moq,
    }
