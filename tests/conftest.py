"""Shared ENTSO-E XML fixtures."""

import pytest


# A44 day-ahead prices: one TimeSeries, one Period (single instances on purpose)
PRICE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<Publication_MarketDocument xmlns="urn:iec62325.351:tc57wg16:451-3:publicationdocument:7:3">
  <mRID>a44-doc-1</mRID>
  <revisionNumber>1</revisionNumber>
  <type>A44</type>
  <createdDateTime>2024-05-31T12:00:00Z</createdDateTime>
  <TimeSeries>
    <mRID>1</mRID>
    <businessType>A62</businessType>
    <in_Domain.mRID codingScheme="A01">10YFR-RTE------C</in_Domain.mRID>
    <out_Domain.mRID codingScheme="A01">10YFR-RTE------C</out_Domain.mRID>
    <currency_Unit.name>EUR</currency_Unit.name>
    <price_Measure_Unit.name>MWH</price_Measure_Unit.name>
    <curveType>A01</curveType>
    <Period>
      <timeInterval>
        <start>2024-05-31T22:00Z</start>
        <end>2024-06-01T01:00Z</end>
      </timeInterval>
      <resolution>PT60M</resolution>
      <Point>
        <position>1</position>
        <price.amount>45.5</price.amount>
      </Point>
      <Point>
        <position>2</position>
        <price.amount>0</price.amount>
      </Point>
      <Point>
        <position>3</position>
      </Point>
    </Period>
  </TimeSeries>
</Publication_MarketDocument>
"""

# A75 generation per type: two series, the first with an empty and a full Period
GENERATION_XML = """<?xml version="1.0" encoding="UTF-8"?>
<GL_MarketDocument xmlns="urn:iec62325.351:tc57wg16:451-6:generationloaddocument:3:0">
  <mRID>a75-doc-1</mRID>
  <type>A75</type>
  <createdDateTime>2024-01-02T08:00:00Z</createdDateTime>
  <TimeSeries>
    <mRID>1</mRID>
    <businessType>A01</businessType>
    <objectAggregation>A08</objectAggregation>
    <inBiddingZone_Domain.mRID codingScheme="A01">10YFR-RTE------C</inBiddingZone_Domain.mRID>
    <quantity_Measure_Unit.name>MAW</quantity_Measure_Unit.name>
    <curveType>A01</curveType>
    <MktPSRType>
      <psrType>B16</psrType>
    </MktPSRType>
    <Period>
      <timeInterval>
        <start>2024-01-01T00:00Z</start>
        <end>2024-01-01T00:45Z</end>
      </timeInterval>
      <resolution>PT15M</resolution>
    </Period>
    <Period>
      <timeInterval>
        <start>2024-01-01T00:00Z</start>
        <end>2024-01-01T00:45Z</end>
      </timeInterval>
      <resolution>PT15M</resolution>
      <Point>
        <position>1</position>
        <quantity>100</quantity>
      </Point>
      <Point>
        <position>2</position>
        <quantity>110.5</quantity>
      </Point>
      <Point>
        <position>3</position>
        <quantity>120</quantity>
      </Point>
    </Period>
  </TimeSeries>
  <TimeSeries>
    <mRID>2</mRID>
    <businessType>A01</businessType>
    <outBiddingZone_Domain.mRID codingScheme="A01">10YFR-RTE------C</outBiddingZone_Domain.mRID>
    <quantity_Measure_Unit.name>MAW</quantity_Measure_Unit.name>
    <curveType>A01</curveType>
    <Period>
      <timeInterval>
        <start>2024-01-01T00:00Z</start>
        <end>2024-01-01T01:00Z</end>
      </timeInterval>
      <resolution>PT30M</resolution>
      <Point>
        <position>2</position>
        <quantity>55</quantity>
      </Point>
      <Point>
        <position>1</position>
        <quantity>50</quantity>
      </Point>
    </Period>
  </TimeSeries>
</GL_MarketDocument>
"""

UNAVAILABILITY_XML = """<?xml version="1.0" encoding="UTF-8"?>
<Unavailability_MarketDocument xmlns="urn:iec62325.351:tc57wg16:451-6:outagedocument:3:0">
  <mRID>a80-doc-1</mRID>
  <type>A80</type>
  <createdDateTime>2024-03-01T10:00:00Z</createdDateTime>
  <TimeSeries>
    <mRID>1</mRID>
    <businessType>A53</businessType>
    <biddingZone_Domain.mRID codingScheme="A01">10YFR-RTE------C</biddingZone_Domain.mRID>
    <quantity_Measure_Unit.name>MAW</quantity_Measure_Unit.name>
    <curveType>A03</curveType>
    <production_RegisteredResource.pSRType.psrType>B14</production_RegisteredResource.pSRType.psrType>
    <Available_Period>
      <timeInterval>
        <start>2024-03-02T00:00Z</start>
        <end>2024-03-03T00:00Z</end>
      </timeInterval>
      <resolution>PT60M</resolution>
      <Point>
        <position>1</position>
        <quantity>900</quantity>
      </Point>
    </Available_Period>
    <Reason>
      <code>B18</code>
      <text>Planned maintenance</text>
    </Reason>
  </TimeSeries>
</Unavailability_MarketDocument>
"""

BALANCING_XML = """<?xml version="1.0" encoding="UTF-8"?>
<Balancing_MarketDocument xmlns="urn:iec62325.351:tc57wg16:451-6:balancingdocument:4:4">
  <mRID>a85-doc-1</mRID>
  <type>A85</type>
  <createdDateTime>2024-02-01T10:00:00Z</createdDateTime>
  <TimeSeries>
    <mRID>1</mRID>
    <businessType>A19</businessType>
    <area_Domain.mRID codingScheme="A01">10YCZ-CEPS-----N</area_Domain.mRID>
    <currency_Unit.name>EUR</currency_Unit.name>
    <price_Measure_Unit.name>MWH</price_Measure_Unit.name>
    <curveType>A03</curveType>
    <Period>
      <timeInterval>
        <start>2024-02-01T00:00Z</start>
        <end>2024-02-01T00:30Z</end>
      </timeInterval>
      <resolution>PT15M</resolution>
      <Point>
        <position>1</position>
        <imbalance_Price.amount>-12.75</imbalance_Price.amount>
        <imbalance_Price.category>A04</imbalance_Price.category>
      </Point>
      <Point>
        <position>2</position>
        <imbalance_Price.amount>80.1</imbalance_Price.amount>
      </Point>
    </Period>
  </TimeSeries>
</Balancing_MarketDocument>
"""

ACKNOWLEDGEMENT_XML = """<?xml version="1.0" encoding="UTF-8"?>
<Acknowledgement_MarketDocument xmlns="urn:iec62325.351:tc57wg16:451-1:acknowledgementdocument:7:0">
  <mRID>ack-1</mRID>
  <createdDateTime>2024-06-01T10:00:00Z</createdDateTime>
  <Reason>
    <code>999</code>
    <text>No matching data found for Data item Day-ahead Prices</text>
  </Reason>
</Acknowledgement_MarketDocument>
"""

UNKNOWN_ROOT_XML = """<?xml version="1.0" encoding="UTF-8"?>
<Weather_Report>
  <TimeSeries>
    <Period><Point><position>1</position></Point></Period>
  </TimeSeries>
</Weather_Report>
"""


@pytest.fixture
def price_xml():
    return PRICE_XML


@pytest.fixture
def generation_xml():
    return GENERATION_XML


@pytest.fixture
def unavailability_xml():
    return UNAVAILABILITY_XML


@pytest.fixture
def balancing_xml():
    return BALANCING_XML


@pytest.fixture
def acknowledgement_xml():
    return ACKNOWLEDGEMENT_XML


@pytest.fixture
def unknown_root_xml():
    return UNKNOWN_ROOT_XML


@pytest.fixture
def write_xml(tmp_path):
    """Write XML content to a temporary file and return its path."""
    def _write(content, name="response.xml"):
        xml_file = tmp_path / name
        xml_file.write_text(content, encoding="utf-8")
        return xml_file
    return _write
