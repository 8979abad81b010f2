"""CVE 레코드 데이터 모델(CVE record data models for JSON 4.0 and 5.x)."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _CVEModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# --- CVE JSON 4.0 -----------------------------------------------------------


class LangString(_CVEModel):
    """언어 태그가 있는 문자열(String with a language tag)."""

    lang: str = ""
    value: str = ""


class CVEMetadata(_CVEModel):
    """CVE 메타데이터(CVE_data_meta block)."""

    id: str = Field(..., alias="ID", min_length=1)
    assigner: str = Field(default="", alias="ASSIGNER")
    state: str = Field(default="", alias="STATE")


class Description(_CVEModel):
    data: List[LangString] = Field(..., alias="description_data")


class Reference(_CVEModel):
    url: str
    name: str = ""
    refsource: str = ""


class References(_CVEModel):
    data: List[Reference] = Field(default_factory=list, alias="reference_data")


class CreditData(_CVEModel):
    description: Description


class Credit(_CVEModel):
    data: Optional[CreditData] = Field(default=None, alias="credit_data")


class ProductDataItem(_CVEModel):
    product_name: str = ""


class Product(_CVEModel):
    data: List[ProductDataItem] = Field(default_factory=list, alias="product_data")


class VendorDataItem(_CVEModel):
    vendor_name: str = ""
    product: Product = Field(default_factory=Product)


class Vendor(_CVEModel):
    data: List[VendorDataItem] = Field(default_factory=list, alias="vendor_data")


class Affects(_CVEModel):
    vendor: Vendor = Field(default_factory=Vendor)


class CVE(_CVEModel):
    """CVE JSON 4.0 레코드(CVE JSON 4.0 record)."""

    data_type: str = ""
    data_format: str = ""
    data_version: str = ""
    metadata: CVEMetadata = Field(..., alias="CVE_data_meta")
    affects: Affects = Field(default_factory=Affects)
    description: Description
    references: References = Field(default_factory=References)
    credit: Credit = Field(default_factory=Credit)


# --- CVE JSON 5.x -----------------------------------------------------------


class Metadata5(_CVEModel):
    """CVE 5 메타데이터(cveMetadata block)."""

    id: str = Field(..., alias="cveId", min_length=1)
    assigner_org_id: str = Field(default="", alias="assignerOrgId")
    state: str = ""


class Affected5(_CVEModel):
    vendor: str = ""
    product: str = ""
    package_name: str = Field(default="", alias="packageName")
    collection_url: str = Field(default="", alias="collectionURL")


class Reference5(_CVEModel):
    url: str
    name: str = ""
    tags: List[str] = Field(default_factory=list)


class Credit5(_CVEModel):
    lang: str = ""
    value: str = ""
    type: str = ""


class CNAPublishedContainer(_CVEModel):
    """CNA 컨테이너(CNA container)."""

    title: str = ""
    descriptions: List[LangString] = Field(default_factory=list)
    affected: List[Affected5] = Field(default_factory=list)
    references: List[Reference5] = Field(default_factory=list)
    credits: List[Credit5] = Field(default_factory=list)


class Containers(_CVEModel):
    cna: CNAPublishedContainer


class CVERecord(_CVEModel):
    """CVE JSON 5.x 레코드(CVE JSON 5.x record)."""

    data_type: str = Field(default="", alias="dataType")
    data_version: str = Field(default="", alias="dataVersion")
    metadata: Metadata5 = Field(..., alias="cveMetadata")
    containers: Containers
