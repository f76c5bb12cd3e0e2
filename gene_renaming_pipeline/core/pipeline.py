#!/usr/bin/env python3

"""
Main pipeline class for gene identifier renaming.

Runs the staged phases: parse, width inference, ingest (pass 1),
renumbering (pass 2), output generation and sequence relabeling.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .config import RenamingConfig
from .data_structures import SeqIdGroup
from .equivalence import EquivalenceTable
from .exceptions import PipelineError, ParseError
from .generators import OutputGenerator
from .parsers import AnnotationFile, GeneAnnotationParser
from .relabeler import RelabelSummary, SequenceRelabeler
from .renumbering import ChildRenumberer, FeatureRenamer, IngestResult
from .rules import RenameRule, compile_rules
from .widths import CounterFormat, resolve_counter_format
from ..utils.performance_monitor import PerformanceMonitor


class GeneRenamingPipeline:
    """Main pipeline class that coordinates all processing phases."""

    def __init__(self, config: RenamingConfig):
        self.config = config
        self.monitor = PerformanceMonitor(memory_limit_mb=config.memory_limit_mb,
                                          enforce_limit=config.enable_memory_monitoring)

        self.annotation: Optional[AnnotationFile] = None
        self.rules: List[RenameRule] = []
        self.counter_format: Optional[CounterFormat] = None
        self.result: Optional[IngestResult] = None
        self.groups: List[SeqIdGroup] = []
        self.table: EquivalenceTable = EquivalenceTable()
        self.relabel_summaries: List[RelabelSummary] = []
        self.output_files: Dict[str, Path] = {}
        self._log_handler: Optional[logging.Handler] = None

    def run(self, gff_file: str, output_dir: str, fasta_files: Sequence[str] = ()) -> bool:
        """
        Run the complete renaming pipeline.

        Args:
            gff_file: Path to the GFF3 annotation file
            output_dir: Output directory path
            fasta_files: Sequence files to relabel with the new identifiers

        Returns:
            True if pipeline completed successfully
        """
        try:
            Path(output_dir).mkdir(parents=True, exist_ok=True)
            self._setup_pipeline_logging(output_dir)

            logging.info("Starting Gene Renaming Pipeline")
            logging.info(f"Configuration: {self.config}")
            logging.info(f"Input files: GFF3={gff_file}, FASTA={list(fasta_files)}")
            logging.info(f"Output directory: {output_dir}")

            self._check_inputs([gff_file, *fasta_files])

            # Phase 1: Parse input
            self._parse_input(gff_file)

            # Phase 2: Compile rules and resolve counter widths
            self._infer_widths()

            # Phase 3: Pass 1
            self._ingest()

            # Phase 4: Pass 2
            self._renumber()

            # Phase 5: Write GFF3 and id map
            self._generate_outputs(gff_file, output_dir)

            # Phase 6: Relabel companion sequences
            if fasta_files:
                self._relabel_sequences(fasta_files, output_dir)

            if self.config.generate_reports:
                self._generate_final_report(output_dir)

            logging.info("Pipeline completed successfully")
            self.monitor.log_performance_report()
            return True

        except Exception as e:
            logging.error(f"Pipeline failed: {e}")
            logging.debug("Full traceback:", exc_info=True)
            return False

        finally:
            self._teardown_pipeline_logging()

    def relabel_only(self, id_map_file: str, fasta_files: Sequence[str], output_dir: str) -> bool:
        """Relabel sequence files from a previously written identifier map."""
        try:
            Path(output_dir).mkdir(parents=True, exist_ok=True)
            self._setup_pipeline_logging(output_dir)
            self._check_inputs([id_map_file, *fasta_files])

            self.table = EquivalenceTable.read_tsv(id_map_file)
            self._relabel_sequences(fasta_files, output_dir)

            if self.config.generate_reports:
                self._generate_final_report(output_dir)
            return True

        except Exception as e:
            logging.error(f"Relabeling failed: {e}")
            logging.debug("Full traceback:", exc_info=True)
            return False

        finally:
            self._teardown_pipeline_logging()

    def _setup_pipeline_logging(self, output_dir: str) -> None:
        """Set up pipeline-specific logging."""
        log_file = Path(output_dir) / 'gene_renaming.log'

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s'
        ))

        root_logger = logging.getLogger()
        root_logger.addHandler(file_handler)
        self._log_handler = file_handler

        if self.config.debug_mode:
            root_logger.setLevel(logging.DEBUG)

    def _teardown_pipeline_logging(self) -> None:
        if self._log_handler is not None:
            logging.getLogger().removeHandler(self._log_handler)
            self._log_handler.close()
            self._log_handler = None

    def _check_inputs(self, paths: Sequence[str]) -> None:
        """Abort before any processing if an input is missing."""
        for path in paths:
            if not Path(path).is_file():
                raise ParseError(f"Input file not found: {path}")

    def _parse_input(self, gff_file: str) -> None:
        with self.monitor.phase_context("input_parsing") as metrics:
            self.annotation = GeneAnnotationParser(gff_file).parse()
            metrics.records_processed = len(self.annotation.records)

    def _infer_widths(self) -> None:
        with self.monitor.phase_context("width_inference") as metrics:
            try:
                self.rules = compile_rules(self.config.rename_rules)
                self.counter_format = resolve_counter_format(
                    self.config.counter_format_spec(), self.annotation.records, self.rules)
                metrics.records_processed = len(self.annotation.records)
                logging.info(f"Counter format: {self.counter_format}")

            except PipelineError:
                raise
            except Exception as e:
                raise PipelineError(f"Failed during width inference: {e}") from e

    def _ingest(self) -> None:
        with self.monitor.phase_context("ingest") as metrics:
            try:
                renamer = FeatureRenamer(self.counter_format, self.rules, self.config.exclude_types)
                self.result = renamer.ingest(self.annotation.records)
                self.table = self.result.table
                metrics.records_processed = len(self.annotation.records)

            except Exception as e:
                raise PipelineError(f"Failed during ingest: {e}") from e

    def _renumber(self) -> None:
        with self.monitor.phase_context("renumbering") as metrics:
            try:
                renumberer = ChildRenumberer(self.counter_format, self.config.exclude_empty_seqids)
                self.groups = renumberer.renumber(self.result)
                metrics.records_processed = self.result.record_count

            except Exception as e:
                raise PipelineError(f"Failed during renumbering: {e}") from e

    def _generate_outputs(self, gff_file: str, output_dir: str) -> None:
        with self.monitor.phase_context("output_generation") as metrics:
            try:
                generator = OutputGenerator(output_dir, self.config.output_suffix,
                                            self.config.include_fasta)
                self.output_files['gff3'] = generator.write_gff3(
                    self.groups, gff_file, self.annotation.fasta_lines)
                if self.config.write_id_map:
                    self.output_files['id_map'] = generator.write_id_map(self.table, gff_file)

                metrics.records_processed = sum(len(g.records) for g in self.groups)
                for file_path in self.output_files.values():
                    logging.info(f"Created: {file_path}")

            except Exception as e:
                raise PipelineError(f"Failed during output generation: {e}") from e

    def _relabel_sequences(self, fasta_files: Sequence[str], output_dir: str) -> None:
        with self.monitor.phase_context("sequence_relabeling") as metrics:
            relabeler = SequenceRelabeler(self.table, output_dir, self.config.output_suffix)
            self.relabel_summaries = relabeler.relabel_files(fasta_files)
            metrics.records_processed = sum(s.processed for s in self.relabel_summaries)

            total = sum(s.processed for s in self.relabel_summaries)
            changed = sum(s.changed for s in self.relabel_summaries)
            logging.info(f"Sequence identifiers: {total} processed, {changed} changed, "
                         f"{total - changed} unchanged")

    def _generate_final_report(self, output_dir: str) -> None:
        """Generate processing report."""
        try:
            report_file = Path(output_dir) / 'processing_report.txt'
            performance = self.monitor.get_performance_summary()
            stats = self.result.stats if self.result else {}

            with open(report_file, 'w') as f:
                f.write("Gene Renaming Pipeline - Processing Report\n")
                f.write("=" * 50 + "\n\n")

                if self.annotation:
                    f.write("INPUT STATISTICS\n")
                    f.write("-" * 20 + "\n")
                    f.write(f"Feature records: {len(self.annotation.records):,}\n")
                    f.write(f"Sequence IDs: {len(self.annotation.seq_ids):,}\n")
                    f.write(f"Skipped malformed lines: {self.annotation.skipped_lines:,}\n\n")

                if self.result:
                    f.write("RENAMING RESULTS\n")
                    f.write("-" * 20 + "\n")
                    f.write(f"Counter format: {self.counter_format}\n")
                    f.write(f"Genes renamed: {stats.get('genes', 0):,}\n")
                    f.write(f"Transcripts renamed: {stats.get('transcripts', 0):,}\n")
                    f.write(f"Child features renamed: {stats.get('children', 0):,}\n")
                    f.write(f"Records excluded by type: {stats.get('excluded', 0):,}\n")
                    f.write(f"Records missing ID: {stats.get('missing_id', 0):,}\n")
                    f.write(f"Records passed through: {stats.get('passed_through', 0):,}\n")
                    f.write(f"SeqID groups written: {len(self.groups):,}\n")
                    f.write(f"Identifier mappings: {len(self.table):,}\n\n")

                if self.relabel_summaries:
                    f.write("SEQUENCE RELABELING\n")
                    f.write("-" * 20 + "\n")
                    for summary in self.relabel_summaries:
                        f.write(f"{summary.input_path}: {summary.processed} processed, "
                                f"{summary.changed} changed, {summary.unchanged} unchanged\n")
                    f.write("\n")

                if performance['phases']:
                    f.write("PHASE BREAKDOWN\n")
                    f.write("-" * 20 + "\n")
                    for phase_name, phase_data in performance['phases'].items():
                        f.write(f"{phase_name}: {phase_data['elapsed_time']:.2f}s ")
                        f.write(f"({phase_data['records_processed']} records)\n")

                f.write(f"\nConfiguration used:\n")
                for key, value in self.config.to_dict().items():
                    f.write(f"  {key}: {value}\n")

            self.output_files['report'] = report_file
            logging.info(f"Generated processing report: {report_file}")

        except OSError as e:
            logging.warning(f"Failed to generate processing report: {e}")
