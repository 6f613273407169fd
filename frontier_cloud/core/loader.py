"""
Data Loader Module
==================

Loads the three input datasets of a frontier-cloud run:
- Mean returns: one row per asset, [identifier, mean return]
- Volatilities: one row per asset, [identifier, volatility]
- Correlations: square matrix, identifier as row label, one column per asset

Every dataset has a header row. A source can be:
1. An http(s) URL (fetched with requests)
2. A local CSV file
3. A local Excel workbook (first sheet)

The three sources are fetched concurrently and joined. The load is all or
nothing: the first failed source aborts it with a single DataLoadError and
nothing is returned.
"""

import io
import logging
import warnings
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Tuple

import numpy as np
import pandas as pd
import requests

from frontier_cloud.core.config import DEFAULT_TIMEOUT
from frontier_cloud.core.portfolio import compute_covariance
from frontier_cloud.errors import ConfigurationError, DataLoadError

logger = logging.getLogger(__name__)

EXCEL_SUFFIXES = ('.xlsx', '.xls')


def _read_only(values) -> np.ndarray:
    arr = np.array(values, dtype=float)
    arr.setflags(write=False)
    return arr


def _is_url(source: str) -> bool:
    return str(source).lower().startswith(('http://', 'https://'))


@dataclass(frozen=True)
class AssetData:
    """
    Parsed input data, immutable once loaded.

    Attributes:
        names: Asset identifiers, in dataset order
        mean_returns: Mean return per asset (decimal)
        volatilities: Volatility per asset (decimal)
        correlations: Correlation matrix (n x n)
    """

    names: Tuple[str, ...]
    mean_returns: np.ndarray
    volatilities: np.ndarray
    correlations: np.ndarray

    @property
    def n_assets(self) -> int:
        return len(self.names)

    def covariance(self) -> np.ndarray:
        """Covariance matrix derived from the volatilities and correlations."""
        return _read_only(compute_covariance(self.volatilities, self.correlations))


class DataLoader:
    """
    A class for loading the returns, volatilities and correlations datasets.

    Example:
        >>> loader = DataLoader()
        >>> data = loader.load("returns.csv", "vols.csv", "corr.csv")
        >>> data.names
        ('Equities', 'Bonds')
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        """
        Initialize the DataLoader.

        Args:
            timeout: HTTP timeout in seconds for remote sources
        """
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def read_table(self, source: str) -> pd.DataFrame:
        """
        Read one dataset into a DataFrame (header row, no index).

        Args:
            source: URL or local path

        Returns:
            DataFrame with the raw table

        Raises:
            DataLoadError: If the source can't be fetched or parsed
        """
        source = str(source)
        logger.debug(f"Reading dataset: {source}")

        if _is_url(source):
            try:
                response = requests.get(source, timeout=self.timeout)
                response.raise_for_status()
            except requests.HTTPError as e:
                status = e.response.status_code if e.response is not None else 'error'
                raise DataLoadError(f"Failed to fetch {source}: {status}") from e
            except requests.RequestException as e:
                raise DataLoadError(f"Failed to fetch {source}: {e}") from e

            if source.lower().split('?')[0].endswith(EXCEL_SUFFIXES):
                return self._parse(lambda: pd.read_excel(io.BytesIO(response.content)), source)
            return self._parse(lambda: pd.read_csv(io.StringIO(response.text)), source)

        path = Path(source)
        if not path.exists():
            raise DataLoadError(f"Data file not found: {path}")

        if path.suffix.lower() in EXCEL_SUFFIXES:
            return self._parse(lambda: pd.read_excel(path), source)
        return self._parse(lambda: pd.read_csv(path), source)

    @staticmethod
    def _parse(read, source: str) -> pd.DataFrame:
        try:
            df = read()
        except (pd.errors.ParserError, pd.errors.EmptyDataError, ValueError, OSError) as e:
            raise DataLoadError(f"Could not parse {source}: {e}") from e

        df = df.dropna(how='all')
        if df.empty:
            raise DataLoadError(f"Dataset {source} has no data rows")
        return df

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    @staticmethod
    def _numeric(frame: pd.DataFrame, label: str) -> np.ndarray:
        values = frame.apply(pd.to_numeric, errors='coerce').to_numpy(dtype=float)
        if np.isnan(values).any():
            bad_rows = sorted(set(np.where(np.isnan(values))[0].tolist()))
            raise DataLoadError(
                f"{label} dataset has missing or non-numeric values in rows {bad_rows}"
            )
        return values

    def parse_vector(self, df: pd.DataFrame, label: str) -> Tuple[List[str], np.ndarray]:
        """
        Split a per-asset table into identifiers and its first numeric column.

        Args:
            df: Table with the identifier in column 0 and values in column 1
            label: Dataset name used in error messages

        Returns:
            Tuple of (asset_names, values)
        """
        if df.shape[1] < 2:
            raise DataLoadError(f"{label} dataset needs an identifier and a value column")

        names = [str(name).strip() for name in df.iloc[:, 0]]
        values = self._numeric(df.iloc[:, [1]], label).flatten()
        return names, values

    def parse_matrix(self, df: pd.DataFrame, label: str) -> Tuple[List[str], np.ndarray]:
        """
        Split a labelled matrix table into row identifiers and the matrix.

        Returns:
            Tuple of (row_names, matrix)
        """
        if df.shape[1] < 2:
            raise DataLoadError(f"{label} dataset needs an identifier and value columns")

        names = [str(name).strip() for name in df.iloc[:, 0]]
        matrix = self._numeric(df.iloc[:, 1:], label)
        return names, matrix

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def fetch_all(self, sources: Dict[str, str]) -> Dict[str, pd.DataFrame]:
        """
        Read several sources concurrently.

        All sources must succeed. The first failure cancels what has not
        started yet and is raised; the other results are discarded.

        Args:
            sources: Mapping of dataset key -> URL or path

        Returns:
            Mapping of dataset key -> DataFrame
        """
        with ThreadPoolExecutor(max_workers=max(len(sources), 1)) as pool:
            futures = {pool.submit(self.read_table, src): key for key, src in sources.items()}
            done, pending = wait(futures, return_when=FIRST_EXCEPTION)

            for future in done:
                if future.exception() is not None:
                    for other in pending:
                        other.cancel()
                    raise future.exception()

            return {key: future.result() for future, key in futures.items()}

    def load(self, returns_source: str, vols_source: str, corr_source: str) -> AssetData:
        """
        Load and assemble the three datasets.

        Args:
            returns_source: URL or path of the mean returns dataset
            vols_source: URL or path of the volatilities dataset
            corr_source: URL or path of the correlations dataset

        Returns:
            AssetData

        Raises:
            DataLoadError: If any dataset can't be fetched or parsed
            ConfigurationError: If the datasets disagree in dimension
        """
        tables = self.fetch_all({
            'returns': returns_source,
            'vols': vols_source,
            'corr': corr_source,
        })

        names, mean_returns = self.parse_vector(tables['returns'], "Returns")
        vol_names, vols = self.parse_vector(tables['vols'], "Volatilities")
        corr_names, corr = self.parse_matrix(tables['corr'], "Correlations")

        logger.info(
            f"Loaded data: {len(mean_returns)} returns, {len(vols)} volatilities, "
            f"{corr.shape[0]}x{corr.shape[1]} correlations"
        )

        if vol_names != names:
            logger.warning("Volatility identifiers differ from return identifiers; aligning by position")
        if corr_names != names:
            logger.warning("Correlation identifiers differ from return identifiers; aligning by position")

        return self.load_direct(names, mean_returns, vols, corr)

    def load_direct(
        self,
        asset_names: List[str],
        mean_returns,
        volatilities,
        correlations
    ) -> AssetData:
        """
        Build AssetData directly from arrays.

        Args:
            asset_names: Asset identifiers
            mean_returns: Vector of mean returns
            volatilities: Vector of volatilities
            correlations: Correlation matrix

        Returns:
            AssetData

        Raises:
            ConfigurationError: If the dimensions don't match
        """
        mean_returns = np.asarray(mean_returns, dtype=float).flatten()
        volatilities = np.asarray(volatilities, dtype=float).flatten()
        correlations = np.asarray(correlations, dtype=float)
        n_assets = len(mean_returns)

        if n_assets == 0:
            raise ConfigurationError("No assets in the returns dataset")
        if len(asset_names) != n_assets:
            raise ConfigurationError(f"Got {len(asset_names)} asset names for {n_assets} returns")
        if len(volatilities) != n_assets:
            raise ConfigurationError(
                f"Dimension mismatch: {n_assets} returns but {len(volatilities)} volatilities"
            )
        if correlations.shape != (n_assets, n_assets):
            raise ConfigurationError(
                f"Dimension mismatch: {n_assets} returns but "
                f"{correlations.shape} correlation matrix"
            )

        data = AssetData(
            names=tuple(str(name) for name in asset_names),
            mean_returns=_read_only(mean_returns),
            volatilities=_read_only(volatilities),
            correlations=_read_only(correlations),
        )

        for message in validate_data(data)['warnings']:
            warnings.warn(message)

        return data


def validate_data(data: AssetData) -> Dict[str, Any]:
    """
    Check the loaded data and return diagnostics.

    Checks:
    - No NaN or Inf values
    - Volatilities are non-negative
    - Correlation matrix is symmetric with a unit diagonal
    - Correlations lie in [-1, 1]
    - Resulting covariance matrix is positive semi-definite

    None of these are enforced; they are reported as warnings.

    Args:
        data: Loaded AssetData

    Returns:
        Dictionary with validation results
    """
    results = {
        'warnings': [],
        'n_assets': data.n_assets,
        'asset_names': list(data.names),
    }
    corr = data.correlations

    if not np.all(np.isfinite(data.mean_returns)) or not np.all(np.isfinite(data.volatilities)):
        results['warnings'].append("Returns or volatilities contain NaN or Inf")
    if np.any(data.volatilities < 0):
        results['warnings'].append("Volatilities contain negative values")

    if not np.all(np.isfinite(corr)):
        results['warnings'].append("Correlation matrix contains NaN or Inf")
        return results

    if not np.allclose(corr, corr.T):
        results['warnings'].append("Correlation matrix is not symmetric")
    if not np.allclose(np.diag(corr), 1.0):
        results['warnings'].append("Correlation matrix diagonal is not 1")
    if np.any(np.abs(corr) > 1 + 1e-12):
        results['warnings'].append("Correlation matrix has values outside [-1, 1]")

    cov = compute_covariance(data.volatilities, corr)
    eigenvalues = np.linalg.eigvalsh((cov + cov.T) / 2)
    if np.any(eigenvalues < -1e-10):
        results['warnings'].append(
            f"Covariance matrix has negative eigenvalues: "
            f"min = {eigenvalues.min():.6e}"
        )

    return results


def load_asset_data(
    returns_source: str,
    vols_source: str,
    corr_source: str,
    timeout: float = DEFAULT_TIMEOUT
) -> AssetData:
    """
    Convenience function to load the three datasets.

    Args:
        returns_source: URL or path of the mean returns dataset
        vols_source: URL or path of the volatilities dataset
        corr_source: URL or path of the correlations dataset
        timeout: HTTP timeout in seconds

    Returns:
        AssetData
    """
    return DataLoader(timeout).load(returns_source, vols_source, corr_source)
